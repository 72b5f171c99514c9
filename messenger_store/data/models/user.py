"""
User data models
"""
from dataclasses import dataclass

from messenger_store.utils.identity import canonicalize

@dataclass
class User:
    """Registered user"""
    first_name: str
    last_name: str
    email: str
    
    @property
    def key(self) -> str:
        return canonicalize(self.email)
    
    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"

@dataclass
class DirectoryEntry:
    """Searchable directory row, ``key`` is stored under ``email``"""
    name: str
    key: str

@dataclass
class CurrentUser:
    """Identity of the caller, passed explicitly to store operations"""
    email: str
    name: str
    
    @property
    def key(self) -> str:
        return canonicalize(self.email)

@dataclass
class UserProfile:
    """User node as stored under its canonical key"""
    key: str
    first_name: str
    last_name: str
    
    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"
