import logging
import secrets

from pydantic import PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_INSECURE_DEFAULT_KEY = "change-me-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CARSERVICE_", extra="ignore")

    db_url: str = "sqlite:///carservice.db"

    log_level: str = "INFO"
    log_json: bool = False

    jwt_secret: str = _INSECURE_DEFAULT_KEY
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    _jwt_secret_generated: bool = PrivateAttr(default=False)

    def get_jwt_secret(self) -> str:
        if self.jwt_secret == _INSECURE_DEFAULT_KEY:
            logger.warning(
                "CARSERVICE_JWT_SECRET is not set, using a random key. "
                "Issued tokens will not survive restarts. "
                "Set CARSERVICE_JWT_SECRET in your environment or .env file."
            )
            self.jwt_secret = secrets.token_urlsafe(32)
            self._jwt_secret_generated = True
        return self.jwt_secret

    @property
    def jwt_secret_is_ephemeral(self) -> bool:
        """True when tokens are signed with a per-process random key."""
        return self.jwt_secret == _INSECURE_DEFAULT_KEY or self._jwt_secret_generated


settings = Settings()
