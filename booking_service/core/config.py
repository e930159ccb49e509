from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    BUSINESS_NAME: str = "Andriana Delcheva"
    BUSINESS_EMAIL: str | None = None
    EMAIL_FROM: str | None = None
    BUSINESS_TIMEZONE: str = "Europe/Berlin"

    GOOGLE_CLIENT_EMAIL: str | None = None
    GOOGLE_PRIVATE_KEY: str | None = None
    GOOGLE_CALENDAR_ID: str | None = None
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    GOOGLE_CALENDAR_API_URL: str = "https://www.googleapis.com/calendar/v3"

    MCP_ENABLED: bool = False
    MCP_SERVER_URL: str | None = None
    MCP_API_KEY: str | None = None

    # JSON array of {"name", "duration", "price"}; empty means built-in catalog
    DEFAULT_SERVICES: str | None = None

    @property
    def google_private_key(self) -> str:
        return (self.GOOGLE_PRIVATE_KEY or "").replace("\\n", "\n")


settings = Settings()
