"""
Receipt Image Service

Prepares an uploaded receipt photo for OCR and for storage on a
transaction:
1. Check the file type and size
2. Decode with Pillow (rejects anything that is not a real image)
3. Apply EXIF orientation, convert to RGB and shrink large photos
4. Re-encode as JPEG and wrap it as a base64 data URL

Receipts are stored inside the transactions file, so keeping them small
matters more than keeping every pixel.
"""

import base64
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from finance_tracker.config import AppSettings, get_settings
from finance_tracker.models.receipt import ReceiptAttachment
from finance_tracker.models.records import utc_now


FORMAT_MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}

JPEG_QUALITY = 85


class ReceiptError(Exception):
    """Base exception for receipt capture errors."""
    pass


class ReceiptImageError(ReceiptError):
    """The upload is not a usable receipt image."""
    pass


class ReceiptImageService:
    """Validates and normalizes receipt images with Pillow."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    @property
    def allowed_mime_types(self) -> set[str]:
        return {
            FORMAT_MIME_TYPES[fmt]
            for fmt in self._settings.supported_formats_list
            if fmt in FORMAT_MIME_TYPES
        }

    def validate_upload(self, image_bytes: bytes, mime_type: str) -> None:
        """
        Check type and size before decoding.

        Raises:
            ReceiptImageError: If the upload is empty, too large or unsupported
        """
        if not image_bytes:
            raise ReceiptImageError("The uploaded file is empty")

        if mime_type.lower() not in self.allowed_mime_types:
            raise ReceiptImageError(
                f"Unsupported image type: {mime_type}. "
                f"Allowed: {sorted(self.allowed_mime_types)}"
            )

        max_bytes = self._settings.max_receipt_size_bytes
        if len(image_bytes) > max_bytes:
            raise ReceiptImageError(
                f"Image is too large ({len(image_bytes)} bytes). "
                f"Maximum is {self._settings.max_receipt_size_mb} MB"
            )

    def normalize(self, image_bytes: bytes) -> tuple[bytes, int, int]:
        """
        Decode, orient, shrink and re-encode an image as JPEG.

        Returns:
            (jpeg_bytes, width, height)

        Raises:
            ReceiptImageError: If Pillow cannot decode the image
        """
        try:
            img = Image.open(BytesIO(image_bytes))
            img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ReceiptImageError(f"Could not read the image: {e}") from e

        img = ImageOps.exif_transpose(img)
        if img.mode != "RGB":
            img = img.convert("RGB")

        max_side = self._settings.receipt_max_dimension
        img.thumbnail((max_side, max_side))

        buffer = BytesIO()
        img.save(buffer, format="JPEG", quality=JPEG_QUALITY, optimize=True)
        return buffer.getvalue(), img.width, img.height

    def prepare(
        self,
        image_bytes: bytes,
        filename: str,
        mime_type: str,
    ) -> tuple[ReceiptAttachment, bytes]:
        """
        Validate and normalize an upload.

        Returns:
            (attachment, jpeg_bytes) - the jpeg bytes are what OCR should read
        """
        self.validate_upload(image_bytes, mime_type)
        jpeg_bytes, width, height = self.normalize(image_bytes)

        attachment = ReceiptAttachment(
            data_url="data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode("ascii"),
            file_name=self._attachment_name(filename),
            width=width,
            height=height,
            size_bytes=len(jpeg_bytes),
        )
        return attachment, jpeg_bytes

    def _attachment_name(self, filename: str) -> str:
        stem = Path(filename).stem if filename else ""
        if not stem:
            stem = f"receipt_{int(utc_now().timestamp() * 1000)}"
        return f"{stem}.jpg"
