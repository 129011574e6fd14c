from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Optional, Tuple


class Settings(BaseSettings):
    APP_NAME: str = "SheetDesk – Spreadsheet Dataset Browser"
    DATABASE_URL: str = "sqlite:///./sheetdesk.db"

    # Base directory = project root
    BASE_DIR: Path = Path(__file__).resolve().parents[2]

    # Uploaded workbooks are kept here, one file per dataset
    UPLOAD_DIR: Path = BASE_DIR / "uploads"

    # Only Excel workbooks are accepted; checked before anything is parsed
    ALLOWED_EXTENSIONS: Tuple[str, ...] = (".xlsx", ".xls")

    # -------- Logging --------
    LOG_LEVEL: str = "INFO"
    # Optional path; enables a rotating file log next to the console one
    LOG_FILE: Optional[Path] = None

    # -------- Client --------
    API_URL: str = "http://localhost:8000"

    class Config:
        # Environment file for local overrides
        env_file = ".env"
        # Ignore extra env vars instead of crashing
        extra = "ignore"


settings = Settings()
