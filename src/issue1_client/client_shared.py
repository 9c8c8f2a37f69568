"""Helpers for client bootstrap."""

from __future__ import annotations

from .config import Issue1ClientConfig
from .core.errors import ConfigurationError
from .core.multipart import FormEncoder, resolve_form_encoder


def validate_client_config(config: Issue1ClientConfig) -> None:
    try:
        config.validate()
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def resolve_encoder(
    *,
    config: Issue1ClientConfig,
    encoder: FormEncoder | None,
) -> FormEncoder:
    if encoder is not None:
        return encoder
    return resolve_form_encoder(config.form_encoding)


__all__ = [
    "validate_client_config",
    "resolve_encoder",
]
