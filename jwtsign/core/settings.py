"""Library settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALGORITHM = "HS256"
LEEWAY_SECONDS_DEFAULT = 0
MIN_RSA_KEY_BITS_DEFAULT = 2048
LOG_LEVEL_DEFAULT = "WARNING"


class JWTSettings(BaseSettings):
    """Signing and verification defaults."""

    model_config = SettingsConfigDict(env_prefix="JWTSIGN_")

    default_algorithm: str = DEFAULT_ALGORITHM
    leeway_seconds: int = LEEWAY_SECONDS_DEFAULT
    required_claims: list[str] = []
    min_rsa_key_bits: int = MIN_RSA_KEY_BITS_DEFAULT
    log_level: str = LOG_LEVEL_DEFAULT
