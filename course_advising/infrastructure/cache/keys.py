"""Cache key builders. Single place for key format (DRY)."""

from course_advising.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_CHALLENGE


def challenge_key(user_id: int) -> str:
    """Cache key for the pending two-factor challenge of a user."""
    return f"{CACHE_PREFIX_CHALLENGE}{CACHE_KEY_SEP}user{CACHE_KEY_SEP}{int(user_id)}"
