"""
License key generation.

Paid keys look like ``Dream-XXXX-XXXX-XXXX``; trial tokens look like
``TRIAL-1A2B3C4D`` so the two are told apart at a glance.
"""

import secrets

# 32 symbols; 0/O and 1/I are left out so keys survive being read aloud.
LICENSE_KEY_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
DEFAULT_KEY_PREFIX = "Dream"
KEY_GROUPS = 3
KEY_GROUP_SIZE = 4
TRIAL_PREFIX = "TRIAL"
TRIAL_TOKEN_BYTES = 4


def generate_license_key(prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """
    Generate a license key in format: PREFIX-XXXX-XXXX-XXXX.

    Args:
        prefix: Human-readable prefix (e.g., 'Dream')

    Returns:
        Generated license key string
    """
    groups = [
        "".join(secrets.choice(LICENSE_KEY_ALPHABET) for _ in range(KEY_GROUP_SIZE))
        for _ in range(KEY_GROUPS)
    ]
    return f"{prefix}-{'-'.join(groups)}"


def generate_trial_token() -> str:
    """
    Generate an opaque trial token in format: TRIAL-XXXXXXXX (upper hex).

    Returns:
        Generated trial token string
    """
    return f"{TRIAL_PREFIX}-{secrets.token_hex(TRIAL_TOKEN_BYTES).upper()}"

