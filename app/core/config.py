from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    redis_url: str = "redis://localhost:6379"
    database_url: str
    upload_dir: str = "public/uploads"
    max_images_per_auction: int = 5
    cors_origins: list[str] = ["http://localhost:3000"]
    rate_limit_requests: int = 60
    rate_limit_window_seconds: int = 10
    bid_rate_limit_requests: int = 5
    bid_rate_limit_window_seconds: int = 10

settings = Settings()
