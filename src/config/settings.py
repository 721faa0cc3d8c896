"""
Configuration settings for the Blog Backend
"""

import os
import logging

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD or QA
DATABASE_URL = os.getenv("DATABASE_URL")
PORT = int(os.getenv("PORT", 8080))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configure logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

# Connection pool sizing
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = int(os.getenv("DB_COMMAND_TIMEOUT", 60))

# Pagination defaults for list endpoints
DEFAULT_PER_PAGE = 30
MAX_PER_PAGE = 100


class JWTEnvironmentConfig:
    """Environment-isolated JWT configuration to prevent cross-environment token reuse"""

    QA_CONFIG = {
        "secret": os.getenv("JWT_SECRET", "qa-default-secret-for-development"),
        "issuer": os.getenv("JWT_ISSUER", "blog-qa-auth"),
        "audience": os.getenv("JWT_AUDIENCE", "blog-qa-api"),
        "allowed_algorithms": ["HS256"],
        "max_token_age": int(os.getenv("JWT_MAX_TOKEN_AGE", 3600)),
    }

    PROD_CONFIG = {
        "secret": os.getenv("JWT_SECRET", "prod-default-secret-change-in-production"),
        "issuer": os.getenv("JWT_ISSUER", "blog-prod-auth"),
        "audience": os.getenv("JWT_AUDIENCE", "blog-prod-api"),
        "allowed_algorithms": ["HS256"],
        "max_token_age": int(os.getenv("JWT_MAX_TOKEN_AGE", 900)),
    }

    @classmethod
    def get_config(cls):
        """Get JWT configuration for current environment"""
        return cls.QA_CONFIG if ENV == "QA" else cls.PROD_CONFIG


logger.info(f"Environment: {ENV}")
jwt_config = JWTEnvironmentConfig.get_config()
logger.info(f"JWT Config - Issuer: {jwt_config['issuer']}, Audience: {jwt_config['audience']}")

if not DATABASE_URL:
    logger.warning("DATABASE_URL not set - the application will refuse to start its database pool")

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
