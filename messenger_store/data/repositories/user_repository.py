"""
User directory Data Access Layer
"""
from typing import List, Optional

from messenger_store.data.models import DirectoryEntry, User, UserProfile
from messenger_store.data.repositories.base import BaseRepository
from messenger_store.data.stores.base import Transaction
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)

DIRECTORY_PATH = "users"


class UserRepository(BaseRepository):
    """User Data Access Class"""
    
    async def register(self, user: User) -> bool:
        """Write the user node and add the user to the directory.

        Returns False when the user was already listed in the directory.
        """
        key = user.key
        
        async def work(txn: Transaction) -> bool:
            node = await txn.get(key)
            if not isinstance(node, dict):
                node = {}
            node["first_name"] = user.first_name
            node["last_name"] = user.last_name
            await txn.set(key, node)
            
            directory = await txn.get(DIRECTORY_PATH)
            if not isinstance(directory, list):
                directory = []
            if any(isinstance(entry, dict) and entry.get("email") == key for entry in directory):
                return False
            directory.append({"name": user.name, "email": key})
            await txn.set(DIRECTORY_PATH, directory)
            return True
        
        added = await self._run_transaction("register_user", work, lock_keys=(DIRECTORY_PATH, key))
        logger.info("User registered", user_key=key, new_entry=added)
        return added
    
    async def exists(self, key: str) -> bool:
        """Whether a user node exists for the key"""
        node = await self._read("user_exists", key)
        return isinstance(node, dict)
    
    async def get_user(self, key: str) -> Optional[UserProfile]:
        node = await self._read("get_user", key)
        if not isinstance(node, dict):
            return None
        first_name = node.get("first_name")
        last_name = node.get("last_name")
        if not isinstance(first_name, str) or not isinstance(last_name, str):
            logger.warning("User node without a usable name", user_key=key)
            return None
        return UserProfile(key=key, first_name=first_name, last_name=last_name)
    
    async def list_all(self) -> List[DirectoryEntry]:
        """All directory entries, skipping malformed ones"""
        directory = await self._read("list_users", DIRECTORY_PATH)
        entries = []
        for entry in directory if isinstance(directory, list) else []:
            if not isinstance(entry, dict):
                continue
            name, key = entry.get("name"), entry.get("email")
            if isinstance(name, str) and isinstance(key, str):
                entries.append(DirectoryEntry(name=name, key=key))
            else:
                logger.warning("Dropping malformed directory entry", entry=entry)
        return entries
    
    async def search(self, query: str, exclude_key: Optional[str] = None) -> List[DirectoryEntry]:
        """Directory entries whose name starts with ``query``, ignoring case"""
        term = query.strip().lower()
        if not term:
            return []
        return [
            entry for entry in await self.list_all()
            if entry.key != exclude_key and entry.name.lower().startswith(term)
        ]
