"""Network configuration constants for the exam application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 3000
DEFAULT_CORS_ORIGINS: tuple[str, ...] = ("*",)
