"""
Blob storage configuration
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional
from pathlib import Path

env_path = Path(__file__).parent.parent.parent / ".env"

class StorageConfig(BaseSettings):
    """Blob storage configuration"""
    
    # "local" writes under local_root, "http" talks to an object store endpoint
    backend: str = Field(default="local", alias="BLOB_BACKEND")
    
    local_root: str = Field(default="assets/blobs", alias="BLOB_LOCAL_ROOT")
    public_base_url: str = Field(default="http://localhost:8000/blobs", alias="BLOB_PUBLIC_BASE_URL")
    
    endpoint: str = Field(default="http://localhost:9000/messenger", alias="BLOB_ENDPOINT")
    access_token: Optional[str] = Field(default=None, alias="BLOB_ACCESS_TOKEN")
    timeout: int = Field(default=30, alias="BLOB_TIMEOUT")
    
    model_config = {
        "env_file": env_path,
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "allow"
    }

storage_config = StorageConfig()
