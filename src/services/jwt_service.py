"""
Environment-isolated JWT service for user access tokens
Tokens signed for one environment are rejected by every other environment
"""

import jwt
import time
import logging
from typing import Dict, Any, Optional

from config.settings import JWTEnvironmentConfig, ENV

logger = logging.getLogger(__name__)

USER = "user"
ADMIN = "admin"
ROLES = (USER, ADMIN)


class JWTService:
    """Issues and validates HS256 user access tokens"""

    def __init__(self, jwt_config: Optional[Dict[str, Any]] = None, environment: str = ENV):
        self.jwt_config = jwt_config or JWTEnvironmentConfig.get_config()
        self.environment = environment
        self.secret_key = self.jwt_config["secret"]
        self.algorithm = self.jwt_config["allowed_algorithms"][0]
        self.issuer = self.jwt_config["issuer"]
        self.audience = self.jwt_config["audience"]

    def generate_access_token(self, user_id: str, role: str = USER) -> str:
        """
        Generate an access token for a user

        Args:
            user_id: Id of the user, stored as the subject claim
            role: User role (user or admin)

        Returns:
            Encoded JWT

        Raises:
            ValueError: If the role is unknown
        """
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")

        current_time = int(time.time())
        payload = {
            "iss": self.issuer,
            "sub": str(user_id),
            "aud": self.audience,
            "environment": self.environment,
            "role": role,
            "iat": current_time,
            "exp": current_time + self.jwt_config["max_token_age"]
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.info(f"Generated access token for user {user_id} with role {role}")
        return token

    def validate_and_decode_jwt(self, token: str) -> Dict[str, Any]:
        """
        Validate a token and return its claims

        Raises:
            jwt.InvalidTokenError: If the token is invalid, expired or from another environment
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=self.jwt_config["allowed_algorithms"],
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["exp", "iat", "sub", "aud", "iss"]}
            )
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token has expired")
            raise jwt.InvalidTokenError("Token has expired")
        except jwt.InvalidAudienceError:
            logger.warning(f"JWT audience validation failed - expected: {self.audience}")
            raise jwt.InvalidTokenError("Invalid audience")
        except jwt.InvalidIssuerError:
            logger.warning(f"JWT issuer validation failed - expected: {self.issuer}")
            raise jwt.InvalidTokenError("Invalid issuer")

        token_env = payload.get("environment")
        if token_env != self.environment:
            raise jwt.InvalidTokenError(f"Environment mismatch: token='{token_env}', server='{self.environment}'")

        role = payload.get("role", USER)
        if role not in ROLES:
            raise jwt.InvalidTokenError(f"Invalid role: {role}")

        logger.debug(f"Validated access token for user {payload['sub']}")
        return payload


# Global service instance
jwt_service = JWTService()


def generate_access_token(user_id: str, role: str = USER) -> str:
    """Generate an access token for a user"""
    return jwt_service.generate_access_token(user_id, role)


def validate_access_token(token: str) -> Dict[str, Any]:
    """Validate and decode a user access token"""
    return jwt_service.validate_and_decode_jwt(token)
