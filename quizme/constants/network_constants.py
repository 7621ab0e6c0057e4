"""Where the QuizMe server listens and how its routes are laid out."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
SERVER_LOG_LEVEL: str = "info"

API_PREFIX: str = "/api"
RESULTS_PAGE_PREFIX: str = "/results"
