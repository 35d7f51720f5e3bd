"""Random verification tokens for replay-protected intents (public_key)."""

import secrets

TOKEN_BYTES = 32


def generate_random_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)
