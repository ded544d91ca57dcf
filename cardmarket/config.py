from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "CardMarket"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/cardmarket"

    ygoprodeck_url: str = "https://db.ygoprodeck.com/api/v7/cardinfo.php"

    cors_origins: list[str] = ["http://localhost:5000"]

    # Pagination defaults applied when page/limit are absent or non-numeric
    default_page: int = 1
    default_page_size: int = 10
    max_page_size: int = 100


settings = Settings()
