"""
Tests for uploaded image processing
"""
import io
import pytest

from fastapi import UploadFile
from PIL import Image
from starlette.datastructures import Headers

from config import settings
from dermassist.core.error_handling import ValidationException
from dermassist.services.image_processing import process_upload, remove_image
from tests.conftest import image_bytes


def make_upload(data: bytes, content_type="image/png", filename="photo.png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.unit
class TestImageProcessing:
    """Test suite for upload validation and resizing"""

    @pytest.mark.asyncio
    async def test_large_image_is_downsized_to_jpeg(self, upload_dir):
        upload = make_upload(image_bytes(size=(2048, 1536), fmt="PNG"))

        image = await process_upload(upload)

        assert image.url == f"/uploads/{image.filename}"
        assert image.filename.endswith(".jpg")
        assert image.original_name == "photo.png"
        assert image.content_type == "image/jpeg"
        with Image.open(io.BytesIO(image.data)) as stored:
            assert stored.format == "JPEG"
            assert stored.size == (1024, 768)
        assert (upload_dir / image.filename).read_bytes() == image.data

    @pytest.mark.asyncio
    async def test_small_image_is_not_enlarged(self, upload_dir):
        image = await process_upload(make_upload(image_bytes(size=(64, 48)), "image/jpeg"))

        with Image.open(io.BytesIO(image.data)) as stored:
            assert stored.size == (64, 48)

    @pytest.mark.asyncio
    async def test_rejects_non_image_content_type(self, upload_dir):
        with pytest.raises(ValidationException) as exc_info:
            await process_upload(make_upload(b"hello", "text/plain", "notes.txt"))

        assert exc_info.value.message == "Only image files are allowed"
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_rejects_undecodable_data(self, upload_dir):
        with pytest.raises(ValidationException) as exc_info:
            await process_upload(make_upload(b"not really a png"))

        assert exc_info.value.message == "Invalid image file"
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_rejects_empty_file(self, upload_dir):
        with pytest.raises(ValidationException) as exc_info:
            await process_upload(make_upload(b""))

        assert exc_info.value.message == "Image file is empty"

    @pytest.mark.asyncio
    async def test_rejects_oversized_file(self, upload_dir, monkeypatch):
        monkeypatch.setattr(settings, "MAX_FILE_SIZE", 100)

        with pytest.raises(ValidationException) as exc_info:
            await process_upload(make_upload(image_bytes(size=(256, 256), fmt="PNG")))

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Image file too large"

    @pytest.mark.asyncio
    async def test_remove_image(self, upload_dir):
        image = await process_upload(make_upload(image_bytes(fmt="PNG")))

        remove_image(image)
        remove_image(image)

        assert not (upload_dir / image.filename).exists()
