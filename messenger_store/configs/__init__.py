"""
Configuration package
"""
from .settings import settings
from .database_config import database_config
from .storage_config import storage_config

__all__ = [
    "settings",
    "database_config", 
    "storage_config",
]
