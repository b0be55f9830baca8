from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")

class Settings(BaseSettings):
    PROJECT_NAME: str = "Savings Goals API"
    # Routes are served from the root by default
    API_PREFIX: str = ""

    # Security
    SECRET_KEY: str = "change-this-secret-key-before-deploying-anywhere" # Change in production
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 # 24 hours
    BCRYPT_ROUNDS: int = 10
    REVOKE_TOKENS_ON_LOGOUT: bool = False

    @field_validator("ALGORITHM")
    @classmethod
    def check_hmac_algorithm(cls, v: str) -> str:
        if v not in HMAC_ALGORITHMS:
            raise ValueError(f"ALGORITHM must be one of {', '.join(HMAC_ALGORITHMS)}")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def check_bcrypt_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("CORS_ORIGIN_URLS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str]) -> list[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    CORS_ORIGIN_URLS: list[str] | str = []

    # Logging
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

settings = Settings()
