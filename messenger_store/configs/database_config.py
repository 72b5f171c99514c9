"""
Database configuration
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from pathlib import Path

env_path = Path(__file__).parent.parent.parent / ".env"

class DatabaseConfig(BaseSettings):
    """Document database configuration"""
    
    # "memory" keeps documents in-process, "postgres" uses a JSONB table
    backend: str = Field(default="memory", alias="DB_BACKEND")
    
    host: str = Field(default="localhost", alias="DB_HOST")
    port: int = Field(default=5432, alias="DB_PORT")
    database: str = Field(default="messenger", alias="DB_NAME")
    username: str = Field(default="postgres", alias="DB_USER")
    password: str = Field(default="postgres", alias="DB_PASSWORD")
    
    # Connection pool configuration
    min_connections: int = Field(default=1, alias="DB_MIN_CONNECTIONS")
    max_connections: int = Field(default=10, alias="DB_MAX_CONNECTIONS")
    connection_timeout: int = Field(default=30, alias="DB_CONNECTION_TIMEOUT")
    
    # Realtime document layout
    documents_table: str = Field(default="documents", alias="DB_DOCUMENTS_TABLE")
    notify_channel: str = Field(default="documents_changed", alias="DB_NOTIFY_CHANNEL")

    model_config = {
        "env_file": env_path,
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "allow"
    }
    
    @property
    def database_url(self) -> str:
        """Build database URL"""
        return f"postgresql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}"

database_config = DatabaseConfig()
