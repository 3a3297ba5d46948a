from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # minor units; balances closer to zero than this count as settled
    SETTLEMENT_EPSILON: int = 1
    # number of minor-unit digits, 2 for cents
    CURRENCY_EXPONENT: int = 2
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SPLITENGINE_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
