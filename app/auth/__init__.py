"""Authentication module."""

from app.auth.auth import get_signing_key, token_required, validate_token

__all__ = ["get_signing_key", "token_required", "validate_token"]
