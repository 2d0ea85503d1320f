import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    APP_NAME = data.get("APP_NAME", "Back Office API")
    ENVIRONMENT = data.get("ENVIRONMENT", "development")
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./backoffice.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    REDIS_KEY_PREFIX = data.get("REDIS_KEY_PREFIX", "backoffice:")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    JWT_ACCESS_SECRET = data.get("JWT_ACCESS_SECRET", "dev-access-secret-change-in-production")
    JWT_REFRESH_SECRET = data.get("JWT_REFRESH_SECRET", "dev-refresh-secret-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(data.get("ACCESS_TOKEN_EXPIRE_MINUTES", 15))
    REFRESH_TOKEN_EXPIRE_DAYS = int(data.get("REFRESH_TOKEN_EXPIRE_DAYS", 7))

    MAX_SESSIONS_PER_USER = int(data.get("MAX_SESSIONS_PER_USER", 10))
    SESSION_TTL_DAYS = int(data.get("SESSION_TTL_DAYS", 7))
    SESSION_CACHE_TTL = int(data.get("SESSION_CACHE_TTL", 86400))
    SESSION_CLEANUP_INTERVAL = int(data.get("SESSION_CLEANUP_INTERVAL", 3600))
    REFRESH_TOKEN_REUSE_CHECK = bool(data.get("REFRESH_TOKEN_REUSE_CHECK", False))

    CACHE_TTL_SHORT = int(data.get("CACHE_TTL_SHORT", 300))
    CACHE_TTL_MEDIUM = int(data.get("CACHE_TTL_MEDIUM", 1800))
    CACHE_TTL_LONG = int(data.get("CACHE_TTL_LONG", 3600))

    RATE_LIMIT_WINDOW_MS = int(data.get("RATE_LIMIT_WINDOW_MS", 15 * 60 * 1000))
    RATE_LIMIT_MAX_REQUESTS = int(data.get("RATE_LIMIT_MAX_REQUESTS", 100))
    RATE_LIMIT_MAX_PUBLIC = int(data.get("RATE_LIMIT_MAX_PUBLIC", 50))
    RATE_LIMIT_MAX_AUTH = int(data.get("RATE_LIMIT_MAX_AUTH", 5))
    RATE_LIMIT_MAX_UPLOAD = int(data.get("RATE_LIMIT_MAX_UPLOAD", 10))
    RATE_LIMIT_MAX_BULK = int(data.get("RATE_LIMIT_MAX_BULK", 2))
    STORE_CREATE_MAX_REQUESTS = int(data.get("STORE_CREATE_MAX_REQUESTS", 2))
    STORE_CREATE_WINDOW_MS = int(data.get("STORE_CREATE_WINDOW_MS", 60 * 60 * 1000))
    STORE_UPDATE_MAX_REQUESTS = int(data.get("STORE_UPDATE_MAX_REQUESTS", 10))
    STORE_UPDATE_WINDOW_MS = int(data.get("STORE_UPDATE_WINDOW_MS", 15 * 60 * 1000))

    GOOGLE_CLIENT_ID = data.get("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET = data.get("GOOGLE_CLIENT_SECRET", "")
    GOOGLE_REDIRECT_URI = data.get(
        "GOOGLE_REDIRECT_URI", "http://localhost:8000/api/auth/google/callback"
    )
    OAUTH_HTTP_TIMEOUT = float(data.get("OAUTH_HTTP_TIMEOUT", 10))

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT == "development"
