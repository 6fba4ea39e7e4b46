import os

from compression import MAX_FILE_SIZE


def _env_flag(name, default="false"):
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Config:
    """Runtime settings read from the environment"""

    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", 5000))
    DEBUG = _env_flag("FLASK_DEBUG")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]
    # hard cap on the request body; anything above it gets the size error
    MAX_CONTENT_LENGTH = MAX_FILE_SIZE + 4 * 1024 * 1024


class TestConfig(Config):
    TESTING = True
    LOG_LEVEL = "DEBUG"
