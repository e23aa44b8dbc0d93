from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Настройки подключения к Shopify
    SHOPIFY_SHOP_URL: str = Field(default="")
    SHOPIFY_ACCESS_TOKEN: str = Field(default="")
    SHOPIFY_API_VERSION: str | None = Field(default="2024-01")

    # Транспорт
    SHOPIFY_TIMEOUT_SECONDS: float = 30.0
    SHOPIFY_MAX_RETRIES: int = 3
    SHOPIFY_MAX_RETRY_WAIT: float = 60.0
    SHOPIFY_USER_AGENT: str = "shopify-rest/0.1.0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


settings = Settings()
