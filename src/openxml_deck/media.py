"""Image formats: extension table and payload signatures."""

from __future__ import annotations

from dataclasses import dataclass


JPEG_MAGIC = (b"\xFF\xD8\xFF",)
PNG_MAGIC = (b"\x89PNG\r\n\x1a\n",)
GIF_MAGIC = (b"GIF87a", b"GIF89a")
BMP_MAGIC = (b"BM",)
TIFF_MAGIC = (b"II*\x00", b"MM\x00*")


def _starts_with_any(data: bytes, candidates: tuple[bytes, ...]) -> bool:
    return any(data.startswith(prefix) for prefix in candidates)


@dataclass(frozen=True)
class ImageFormat:
    """A supported image format."""

    name: str
    content_type: str
    extensions: tuple[str, ...]  # first one is used for new media parts
    signatures: tuple[bytes, ...]

    @property
    def ext(self) -> str:
        return self.extensions[0]

    def matches(self, data: bytes) -> bool:
        return _starts_with_any(data, self.signatures)


PNG = ImageFormat("png", "image/png", ("png",), PNG_MAGIC)
JPEG = ImageFormat("jpeg", "image/jpeg", ("jpeg", "jpg", "jpe"), JPEG_MAGIC)
GIF = ImageFormat("gif", "image/gif", ("gif",), GIF_MAGIC)
BMP = ImageFormat("bmp", "image/bmp", ("bmp",), BMP_MAGIC)
TIFF = ImageFormat("tiff", "image/tiff", ("tiff", "tif"), TIFF_MAGIC)

IMAGE_FORMATS: tuple[ImageFormat, ...] = (PNG, JPEG, GIF, BMP, TIFF)

# extension -> content type, for every extension any format accepts
IMAGE_CONTENT_TYPES: dict[str, str] = {
    ext: fmt.content_type for fmt in IMAGE_FORMATS for ext in fmt.extensions
}

# Formats stored without deflate compression
PRECOMPRESSED_EXTENSIONS = frozenset({"png", "jpeg", "jpg", "jpe", "gif"})


def format_for_extension(ext: str) -> ImageFormat | None:
    ext = ext.lower().lstrip(".")
    for fmt in IMAGE_FORMATS:
        if ext in fmt.extensions:
            return fmt
    return None


def detect_format(data: bytes) -> ImageFormat | None:
    """Identify an image format from its leading bytes."""
    for fmt in IMAGE_FORMATS:
        if fmt.matches(data):
            return fmt
    return None
