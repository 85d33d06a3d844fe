from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=BASE_DIR / ".env", env_file_encoding="utf-8")

    # Supabase (event repository)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    EVENTS_TABLE: str = "events"

    # Gemini (recommendation oracle)
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    ORACLE_TIMEOUT: float = 60.0

    # Recommendations
    RECOMMENDATION_COUNT: int = 3

    # Event validation
    MAX_ATTENDEES_LIMIT: int = 10_000

    # Oracle call audit log
    ORACLE_LOG_ENABLED: bool = True
    LOGS_DIR: Path = BASE_DIR / "data" / "logs"


settings = Settings()
