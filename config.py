import os
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv
from fastapi import Request

from logger import logger

DEFAULT_MONGO_URI = "mongodb://localhost:27017/yusmov"
DEFAULT_JWT_SECRET = "your_jwt_secret_here"


@dataclass(frozen=True)
class Settings:
    mongo_uri: str = DEFAULT_MONGO_URI
    database_name: str = "yusmov"
    port: int = 8080
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_expires_in: timedelta = timedelta(days=7)
    bcrypt_rounds: int = 12
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment, reading a local .env first."""
        load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env"))

        mongo_uri = os.getenv("CONNECTION_URI")
        if not mongo_uri:
            logger.warning("CONNECTION_URI not set, falling back to local MongoDB")
            mongo_uri = DEFAULT_MONGO_URI

        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            logger.warning("JWT_SECRET not set, using the insecure default secret")
            jwt_secret = DEFAULT_JWT_SECRET

        return cls(
            mongo_uri=mongo_uri,
            database_name=os.getenv("DB_NAME", "yusmov"),
            port=int(os.getenv("PORT", 8080)),
            jwt_secret=jwt_secret,
            jwt_expires_in=timedelta(hours=int(os.getenv("JWT_EXPIRES_IN_HOURS", 168))),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", 12)),
            log_level="DEBUG" if os.getenv("DEBUG") else "INFO",
        )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
