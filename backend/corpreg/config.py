from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database (local file, owned by this process)
    database_url: str = "sqlite:///./corpreg.db"

    # CORS (comma-separated)
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Application
    app_name: str = "corpreg - 법인 사업연도 관리"
    debug: bool = False
    log_level: str = "INFO"

    # Export
    export_encoding: str = "utf-8-sig"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_prefix = "CORPREG_"
        case_sensitive = False


settings = Settings()
