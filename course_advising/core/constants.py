"""Core constants: cache key prefixes and shared literal values."""

# Cache key prefixes (used with :id)
CACHE_PREFIX_CHALLENGE = "challenge"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Two-factor codes are fixed-width decimal strings (leading zeros significant)
TWO_FACTOR_CODE_DIGITS = 6

# Byte length of one-time verification / reset tokens (hex-encoded on the wire)
ONE_TIME_TOKEN_BYTES = 32

# Email template keys (rendered by infrastructure.services.email_template_renderer)
TEMPLATE_TWO_FACTOR_CODE = "two_factor_code"
TEMPLATE_TWO_FACTOR_CODE_RESEND = "two_factor_code_resend"
TEMPLATE_VERIFY_EMAIL = "verify_email"
TEMPLATE_EMAIL_VERIFIED = "email_verified"
TEMPLATE_PASSWORD_RESET = "password_reset"
TEMPLATE_ADVISING_REVIEWED = "advising_reviewed"
