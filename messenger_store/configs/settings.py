"""
Application configuration
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

env_path = Path(__file__).parent.parent.parent / ".env"
# Export .env to the process environment as well, existing variables win
load_dotenv(dotenv_path=env_path, override=False)

class Settings(BaseSettings):
    """Application settings"""
    
    # Basic application configuration
    app_name: str = Field(default="messenger-store", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    
    # Server configuration
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    
    # Log configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_max_size: int = Field(default=10485760, alias="LOG_MAX_SIZE")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")
    
    # Store behaviour
    store_timeout: float = Field(default=10.0, alias="STORE_TIMEOUT")  # seconds per remote call
    store_max_retries: int = Field(default=3, alias="STORE_MAX_RETRIES")
    
    model_config = {
        "env_file": env_path,
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "allow"
    }


settings = Settings()
