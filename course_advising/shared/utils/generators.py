"""Token and code generators backed by the ``secrets`` CSPRNG."""

import secrets

from course_advising.core.constants import ONE_TIME_TOKEN_BYTES, TWO_FACTOR_CODE_DIGITS


def generate_token(nbytes: int = ONE_TIME_TOKEN_BYTES) -> str:
    """Generate a random hex token for one-time email links.

    Args:
        nbytes: Random bytes to draw; the result has twice as many hex characters.

    Returns:
        Lowercase hex string.
    """
    return secrets.token_hex(nbytes)


def generate_two_factor_code(digits: int = TWO_FACTOR_CODE_DIGITS) -> str:
    """Generate a uniformly random zero-padded decimal code (e.g. '004217')."""
    return f"{secrets.randbelow(10**digits):0{digits}d}"
