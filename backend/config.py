# config.py
import os

from errors import ConfigurationError

def _csv_env(name: str, default: str = "") -> list[str]:
    val = os.getenv(name, default)
    # split only if non-empty; strip whitespace
    return [x.strip() for x in val.split(",") if x.strip()] if val else []

def _api_key() -> str:
    return (os.getenv("GROQ_API_KEY") or os.getenv("LLM_API_KEY") or "").strip()

class BaseConfig:
    DEBUG = False
    TESTING = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # LLM provider (OpenAI-compatible chat completions)
    LLM_API_KEY = _api_key()
    LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.groq.com/openai/v1")
    LLM_MODEL = os.getenv("LLM_MODEL", "llama-3.3-70b-versatile")
    LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.4"))
    LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "2048"))
    LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))

    # Retry policy: extra attempts after the first, fixed delay in seconds
    LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "1"))
    LLM_RETRY_DELAY = float(os.getenv("LLM_RETRY_DELAY", "1.0"))

    # CORS
    CORS_ORIGINS = _csv_env("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")

    # Rate limits
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "200 per hour")
    RATELIMIT_AI = os.getenv("RATELIMIT_AI", "20 per minute")

class DevConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

class ProdConfig(BaseConfig):
    pass

class TestConfig(BaseConfig):
    TESTING = True
    LLM_API_KEY = "test-key"
    LLM_MAX_RETRIES = 1
    LLM_RETRY_DELAY = 0.0
    RATELIMIT_ENABLED = False
    CORS_ORIGINS = ["*"]

def validate_required_secrets():
    if os.getenv("ENV") == "prod" and not _api_key():
        raise ConfigurationError("GROQ_API_KEY must be set in production")
