"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

FORM_ENCODINGS = ("server", "browser")


@dataclass(slots=True, frozen=True)
class TransportConfig:
    """Transport-related settings."""

    timeout_connect_seconds: float = 5.0
    timeout_read_seconds: float = 30.0
    timeout_write_seconds: float = 30.0
    timeout_pool_seconds: float = 5.0

    def validate(self) -> None:
        for field_name in (
            "timeout_connect_seconds",
            "timeout_read_seconds",
            "timeout_write_seconds",
            "timeout_pool_seconds",
        ):
            if getattr(self, field_name) <= 0:
                raise ValueError(f"transport.{field_name} must be > 0")


@dataclass(slots=True, frozen=True)
class Issue1ClientConfig:
    """Runtime configuration for the issue#1 REST client."""

    base_url: str = "http://localhost:8080"
    user_agent: str = "issue1-client/0.1.0"
    form_encoding: str = "server"

    transport: TransportConfig = field(default_factory=TransportConfig)

    def validate(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if self.form_encoding not in FORM_ENCODINGS:
            raise ValueError(f"form_encoding must be one of {', '.join(FORM_ENCODINGS)}")
        self.transport.validate()


__all__ = [
    "FORM_ENCODINGS",
    "TransportConfig",
    "Issue1ClientConfig",
]
