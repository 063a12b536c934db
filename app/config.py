import sys
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database path - can be overridden via DATABASE_PATH env var for Docker
    database_path: str = "math_quiz.db"
    # JWT_SECRET must be set via environment variable - no default
    jwt_secret: str = ""
    # Environment: "dev" (default) or "prod"
    env: str = "dev"
    # CORS origins (comma-separated); empty = local dev defaults
    cors_origins: str = ""
    # Level of the first question in a new quiz session
    initial_level: int = 3
    # Used when a question has no duration configured
    default_question_duration: int = 60
    # How many of the most recent answers the level engine sees
    answer_window_size: int = 5

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def _load_settings() -> Settings:
    """Load settings and validate critical requirements."""
    s = Settings()

    # JWT_SECRET is required - no hardcoded fallback
    if not s.jwt_secret:
        print("ERROR: JWT_SECRET environment variable is required but not set.", file=sys.stderr)
        print("Set JWT_SECRET to a secure random string (at least 32 characters).", file=sys.stderr)
        sys.exit(1)

    if len(s.jwt_secret) < 32:
        print("ERROR: JWT_SECRET must be at least 32 characters.", file=sys.stderr)
        sys.exit(1)

    if not 1 <= s.initial_level <= 6:
        print("ERROR: INITIAL_LEVEL must be between 1 and 6.", file=sys.stderr)
        sys.exit(1)

    if s.default_question_duration <= 0:
        print("ERROR: DEFAULT_QUESTION_DURATION must be a positive number of seconds.", file=sys.stderr)
        sys.exit(1)

    if not 1 <= s.answer_window_size <= 5:
        print("ERROR: ANSWER_WINDOW_SIZE must be between 1 and 5.", file=sys.stderr)
        sys.exit(1)

    return s


settings = _load_settings()
