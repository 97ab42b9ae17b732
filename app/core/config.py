from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.docker"),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    APP_NAME: str = Field(default="confetti_order_bot", validation_alias=AliasChoices("APP_NAME", "app_name"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    # Store
    STORE_NAME: str = Field(default="Confetti London LY", validation_alias=AliasChoices("STORE_NAME", "store_name"))
    CURRENCY_SYMBOL: str = Field(default="$", validation_alias=AliasChoices("CURRENCY_SYMBOL", "currency_symbol"))
    INVOICE_DIR: str = Field(default="invoices", validation_alias=AliasChoices("INVOICE_DIR", "invoice_dir"))

    # Infrastructure
    DATABASE_URL: str = Field(
        default="postgresql+asyncpg://postgres:postgres@db:5432/confetti_orders",
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
    )

    # WhatsApp Meta
    WHATSAPP_VERIFY_TOKEN: str = Field(
        default="",
        validation_alias=AliasChoices("WHATSAPP_VERIFY_TOKEN", "WEBHOOK_VERIFY_TOKEN"),
    )
    WHATSAPP_ACCESS_TOKEN: str = Field(
        default="",
        validation_alias=AliasChoices("WHATSAPP_ACCESS_TOKEN", "GRAPH_API_TOKEN"),
    )
    WHATSAPP_PHONE_NUMBER_ID: str = Field(
        default="",
        validation_alias=AliasChoices("WHATSAPP_PHONE_NUMBER_ID", "BUSINESS_PHONE_NUMBER_ID"),
    )
    # Empty disables X-Hub-Signature-256 verification
    WHATSAPP_APP_SECRET: str = Field(default="", validation_alias=AliasChoices("WHATSAPP_APP_SECRET", "APP_SECRET"))
    WHATSAPP_API_VERSION: str = Field(default="v20.0", validation_alias=AliasChoices("WHATSAPP_API_VERSION", "whatsapp_api_version"))
    WHATSAPP_TIMEOUT_SECONDS: float = Field(
        default=15.0,
        validation_alias=AliasChoices("WHATSAPP_TIMEOUT_SECONDS", "whatsapp_timeout_seconds"),
    )


settings = Settings()
