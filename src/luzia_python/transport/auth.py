"""
API key resolution utilities.

Resolves the API key from multiple sources:
1. Explicit value
2. Environment variable (LUZIA_API_KEY)
3. System keyring (optional)
"""

from __future__ import annotations

import os

from luzia_python._features import HAS_KEYRING, require_extra

API_KEY_ENV = "LUZIA_API_KEY"
KEYRING_SERVICE = "luzia"


def resolve_api_key(explicit_key: str | None = None) -> str | None:
    """Resolve the API key.

    Resolution order:
    1. Explicit key if provided
    2. LUZIA_API_KEY environment variable
    3. System keyring (if available)

    Args:
        explicit_key: Explicitly provided API key

    Returns:
        Resolved API key or None if not found
    """
    if explicit_key:
        return explicit_key

    key = os.getenv(API_KEY_ENV)
    if key:
        return key

    return _try_keyring()


def _try_keyring() -> str | None:
    """Try to get the API key from the system keyring."""
    if not HAS_KEYRING:
        return None
    try:
        import keyring

        return keyring.get_password(KEYRING_SERVICE, "api_key") or None
    except Exception:
        # Keyring backend error (common in containers, WSL, etc.)
        return None


def store_api_key(api_key: str) -> None:
    """Save the API key in the system keyring for later resolution.

    Raises:
        ImportError: If the ``keyring`` extra is not installed
    """
    require_extra("keyring", "keyring")
    import keyring

    keyring.set_password(KEYRING_SERVICE, "api_key", api_key)


def get_auth_header(api_key: str) -> dict[str, str]:
    """Build the bearer authentication header.

    Args:
        api_key: API key

    Returns:
        Dictionary with the Authorization header
    """
    return {"Authorization": f"Bearer {api_key}"}
