import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from messenger_store.configs.storage_config import StorageConfig
from messenger_store.services.blob_service import (
    BlobCategory,
    BlobReferenceService,
    HttpBlobBackend,
    LocalBlobBackend,
    create_blob_service,
)
from messenger_store.utils.exceptions import BlobError, BlobNotFoundError, BlobUploadError


async def test_local_upload_returns_public_url(blobs, tmp_path):
    url = await blobs.upload(b"\x89PNG", "a-x-com_profile_picture.png", BlobCategory.PROFILE_PICTURE)

    assert url == "http://files.test/blobs/images/a-x-com_profile_picture.png"
    assert (tmp_path / "blobs" / "images" / "a-x-com_profile_picture.png").read_bytes() == b"\x89PNG"
    assert await blobs.resolve("/images/a-x-com_profile_picture.png") == url


async def test_local_resolve_missing_object(blobs):
    with pytest.raises(BlobNotFoundError) as excinfo:
        await blobs.resolve("images/nobody_profile_picture.png")
    assert excinfo.value.status_code == 404


@pytest.mark.parametrize("file_name", ["", "..", "../escape.png", "nested/name.png"])
async def test_upload_rejects_unsafe_file_names(blobs, file_name):
    with pytest.raises(BlobUploadError):
        await blobs.upload(b"data", file_name, BlobCategory.MESSAGE_PHOTO)


def test_content_types_per_category():
    assert BlobCategory.MESSAGE_VIDEO.content_type_for("clip.mp4") == "video/quicktime"
    assert BlobCategory.MESSAGE_PHOTO.content_type_for("photo.png") == "image/png"
    assert BlobCategory.PROFILE_PICTURE.content_type_for("blob") == "application/octet-stream"


def test_create_blob_service_picks_backend():
    local = create_blob_service(StorageConfig(backend="local", local_root="/tmp/blobs"))
    remote = create_blob_service(StorageConfig(backend="http", endpoint="http://objects.test/bucket"))

    assert isinstance(local.backend, LocalBlobBackend)
    assert isinstance(remote.backend, HttpBlobBackend)
    assert remote.backend.endpoint == "http://objects.test/bucket"


def _object_store(objects, fail_uploads=False):
    async def put(request):
        if fail_uploads:
            return web.Response(status=500, text="disk full")
        objects[request.match_info["path"]] = (await request.read(), request.headers["Content-Type"])
        return web.Response(status=201)

    async def head(request):
        return web.Response(status=200 if request.match_info["path"] in objects else 404)

    app = web.Application()
    app.router.add_put("/bucket/{path:.*}", put)
    app.router.add_head("/bucket/{path:.*}", head)
    return app


async def test_http_backend_uploads_and_resolves():
    objects = {}
    async with TestServer(_object_store(objects)) as server:
        service = BlobReferenceService(HttpBlobBackend(str(server.make_url("/bucket")), access_token="secret"))
        await service.initialize()
        try:
            url = await service.upload(b"movie", "video_message_m1.mov", BlobCategory.MESSAGE_VIDEO)

            assert url == str(server.make_url("/bucket/messages_videos/video_message_m1.mov"))
            assert objects["messages_videos/video_message_m1.mov"] == (b"movie", "video/quicktime")
            assert await service.resolve("messages_videos/video_message_m1.mov") == url

            with pytest.raises(BlobNotFoundError):
                await service.resolve("images/missing.png")
        finally:
            await service.close()


async def test_http_backend_upload_failure():
    async with TestServer(_object_store({}, fail_uploads=True)) as server:
        service = BlobReferenceService(HttpBlobBackend(str(server.make_url("/bucket"))))
        try:
            with pytest.raises(BlobUploadError) as excinfo:
                await service.upload(b"img", "photo_message_m1.png", BlobCategory.MESSAGE_PHOTO)
            assert "HTTP 500" in excinfo.value.message
        finally:
            await service.close()


async def test_http_backend_unreachable():
    service = BlobReferenceService(HttpBlobBackend("http://127.0.0.1:9/bucket", timeout=2))
    try:
        with pytest.raises(BlobError):
            await service.resolve("images/a.png")
    finally:
        await service.close()
