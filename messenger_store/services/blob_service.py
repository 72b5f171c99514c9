"""
Blob Reference Service - binary assets in an object store, addressed by URL
"""
import asyncio
import mimetypes
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional

import aiohttp

from messenger_store.configs.storage_config import StorageConfig, storage_config
from messenger_store.utils.exceptions import BlobError, BlobNotFoundError, BlobUploadError
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)


class BlobCategory(str, Enum):
    """Top-level folders of the object store"""
    PROFILE_PICTURE = "images"
    MESSAGE_PHOTO = "messages_images"
    MESSAGE_VIDEO = "messages_videos"

    def content_type_for(self, file_name: str) -> str:
        if self == BlobCategory.MESSAGE_VIDEO:
            return "video/quicktime"
        guessed, _ = mimetypes.guess_type(file_name)
        return guessed or "application/octet-stream"


class BlobBackend(ABC):
    """Object store driver"""

    async def initialize(self):
        pass

    async def close(self):
        pass

    @abstractmethod
    async def put(self, path: str, data: bytes, content_type: str):
        """Store bytes at path"""

    @abstractmethod
    async def url_for(self, path: str) -> str:
        """Public URL of an existing object, BlobNotFoundError otherwise"""


class LocalBlobBackend(BlobBackend):
    """Objects as files below a root directory, served from ``public_base_url``"""

    def __init__(self, root: str, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _file(self, path: str) -> Path:
        return self.root / path

    async def put(self, path: str, data: bytes, content_type: str):
        target = self._file(path)

        def write():
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(write)
        except OSError as e:
            raise BlobUploadError(path, str(e)) from e

    async def url_for(self, path: str) -> str:
        exists = await asyncio.to_thread(self._file(path).is_file)
        if not exists:
            raise BlobNotFoundError(path)
        return f"{self.public_base_url}/{path}"


class HttpBlobBackend(BlobBackend):
    """Object store reachable over HTTP: PUT uploads, HEAD checks presence"""

    def __init__(self, endpoint: str, access_token: Optional[str] = None, timeout: int = 30):
        self.endpoint = endpoint.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def initialize(self):
        if self.session is None:
            headers = {"Authorization": f"Bearer {self.access_token}"} if self.access_token else None
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=headers
            )
            logger.info("Blob HTTP client initialized", endpoint=self.endpoint)

    async def close(self):
        if self.session is not None:
            await self.session.close()
            self.session = None

    async def _session(self) -> aiohttp.ClientSession:
        if self.session is None:
            await self.initialize()
        return self.session

    async def put(self, path: str, data: bytes, content_type: str):
        session = await self._session()
        url = f"{self.endpoint}/{path}"
        try:
            async with session.put(url, data=data, headers={"Content-Type": content_type}) as response:
                if response.status >= 300:
                    body = await response.text()
                    raise BlobUploadError(path, f"HTTP {response.status}: {body[:200]}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BlobUploadError(path, str(e) or type(e).__name__) from e

    async def url_for(self, path: str) -> str:
        session = await self._session()
        url = f"{self.endpoint}/{path}"
        try:
            async with session.head(url) as response:
                if response.status == 404:
                    raise BlobNotFoundError(path)
                if response.status >= 300:
                    raise BlobError(f"Failed to resolve {path}: HTTP {response.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BlobError(f"Failed to resolve {path}: {str(e) or type(e).__name__}") from e
        return url


class BlobReferenceService:
    """Uploads assets and hands back the URLs messages and profiles refer to"""

    def __init__(self, backend: BlobBackend):
        self.backend = backend

    async def initialize(self):
        await self.backend.initialize()

    async def close(self):
        await self.backend.close()

    async def upload(self, data: bytes, file_name: str, category: BlobCategory) -> str:
        """Store ``data`` as ``<category>/<file_name>`` and return its URL"""
        if not file_name or "/" in file_name or file_name in (".", ".."):
            raise BlobUploadError(file_name, "invalid file name")

        path = f"{category.value}/{file_name}"
        await self.backend.put(path, data, category.content_type_for(file_name))
        try:
            url = await self.backend.url_for(path)
        except BlobNotFoundError as e:
            raise BlobUploadError(path, "download URL unavailable after upload") from e

        logger.info("Blob uploaded", path=path, size=len(data))
        return url

    async def resolve(self, path: str) -> str:
        """URL for an existing object path such as ``images/<key>_profile_picture.png``"""
        return await self.backend.url_for(path.strip("/"))


def create_blob_service(config: StorageConfig = storage_config) -> BlobReferenceService:
    """Build the configured backend"""
    if config.backend == "local":
        backend = LocalBlobBackend(config.local_root, config.public_base_url)
    elif config.backend == "http":
        backend = HttpBlobBackend(config.endpoint, config.access_token, config.timeout)
    else:
        raise ValueError(f"Unknown blob backend: {config.backend}")
    return BlobReferenceService(backend)
