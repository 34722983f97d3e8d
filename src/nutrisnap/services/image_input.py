"""Image upload validation and data URL encoding."""

import base64

from nutrisnap.domain.errors import PayloadTooLargeError, UnsupportedMediaTypeError

MAX_IMAGE_BYTES = 10 * 1024 * 1024

_EXTENSION_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def validate_image(data: bytes, content_type: str | None) -> str:
    """Check an uploaded image and return it as a base64 data URL."""
    mime_type = content_type or ""
    if not mime_type.startswith("image/"):
        raise UnsupportedMediaTypeError
    if len(data) > MAX_IMAGE_BYTES:
        raise PayloadTooLargeError
    return to_data_url(data, mime_type)


def to_data_url(data: bytes, mime_type: str) -> str:
    """Encode bytes as a self-describing base64 data URL."""
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def guess_mime_type(file_path: str | None, data: bytes) -> str:
    """Guess an image MIME type from a file path, then from its bytes."""
    if file_path:
        lowered = file_path.lower()
        for extension, mime_type in _EXTENSION_MIME_TYPES.items():
            if lowered.endswith(extension):
                return mime_type
    return detect_mime_type(data)


def detect_mime_type(data: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
