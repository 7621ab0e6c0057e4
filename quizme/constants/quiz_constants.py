"""Quiz-related constants shared across the core and server layers."""

import string

QUIZ_CODE_LENGTH: int = 6
QUIZ_CODE_ALPHABET: str = string.ascii_uppercase + string.digits
MAX_CODE_ATTEMPTS: int = 32

DEFAULT_DURATION_MINUTES: int = 30
TRUE_FALSE_VALUES: tuple[str, str] = ("true", "false")
