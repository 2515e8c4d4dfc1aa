import os


class Config:
    DEBUG = os.environ.get("TAL_DEBUG", "0") == "1"
    LOG_LEVEL = os.environ.get("TAL_LOG_LEVEL", "INFO").upper()
    # larger request bodies are refused by Flask with 413
    MAX_CONTENT_LENGTH = int(os.environ.get("TAL_MAX_SOURCE_BYTES", 64 * 1024))
    CORS_ORIGINS = os.environ.get("TAL_CORS_ORIGINS", "*")
