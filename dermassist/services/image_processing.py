"""
Image upload processing
Validates an uploaded photo, downsizes it and stores it as JPEG under
UPLOAD_DIR. The processed bytes are what gets sent to the AI model.
"""

import asyncio
import io
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from config import settings
from dermassist.core.error_handling import ValidationException

logger = logging.getLogger(__name__)


@dataclass
class ProcessedImage:
    filename: str
    path: str
    original_name: Optional[str]
    size: int
    data: bytes
    content_type: str = "image/jpeg"

    @property
    def url(self) -> str:
        return f"/uploads/{self.filename}"


def _to_jpeg(raw: bytes, max_dimension: int, quality: int) -> bytes:
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            image = img.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValidationException("Invalid image file", {"reason": str(e)}) from e

    # thumbnail() keeps aspect ratio and never enlarges
    image.thumbnail((max_dimension, max_dimension))

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality, progressive=True)
    return buffer.getvalue()


def _write_file(path: str, data: bytes):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)


async def process_upload(
    upload: UploadFile,
    upload_dir: Optional[str] = None,
) -> ProcessedImage:
    """
    Validate and store an uploaded image.

    Raises ValidationException for non-image content types, oversized files
    and data Pillow cannot decode.
    """
    upload_dir = upload_dir or settings.UPLOAD_DIR

    if not upload.content_type or not upload.content_type.startswith("image/"):
        raise ValidationException("Only image files are allowed")

    raw = await upload.read()
    if not raw:
        raise ValidationException("Image file is empty")
    if len(raw) > settings.MAX_FILE_SIZE:
        raise ValidationException(
            "Image file too large",
            {"max_bytes": settings.MAX_FILE_SIZE, "size": len(raw)},
        )

    # Pillow work is blocking
    data = await asyncio.to_thread(
        _to_jpeg, raw, settings.IMAGE_MAX_DIMENSION, settings.JPEG_QUALITY
    )

    filename = f"{uuid.uuid4()}.jpg"
    path = os.path.join(upload_dir, filename)
    await asyncio.to_thread(_write_file, path, data)

    logger.info(f"Stored upload {upload.filename} as {filename} ({len(raw)} -> {len(data)} bytes)")

    return ProcessedImage(
        filename=filename,
        path=path,
        original_name=upload.filename,
        size=len(raw),
        data=data,
    )


def remove_image(image: ProcessedImage):
    """Delete a stored upload after a failed submission"""
    try:
        os.remove(image.path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove upload {image.path}: {e}")
