"""
Validation utilities.

Shared validation for uploaded images and caller-supplied text.
"""

import base64
import binascii
from typing import Any, Dict, Iterable, Optional

from shared.errors import ValidationError

# Leading bytes of the image formats the video models accept
IMAGE_SIGNATURES = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}


def detect_image_mime(data: bytes) -> Optional[str]:
    """
    Detect an image's MIME type from its leading bytes.

    Args:
        data: Raw image bytes

    Returns:
        MIME type, or None if the format is not recognised
    """
    for signature, mime in IMAGE_SIGNATURES.items():
        if data.startswith(signature):
            return mime
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def validate_image_bytes(
    data: bytes,
    max_size_mb: int = 10,
    field: str = "Image"
) -> str:
    """
    Validate an uploaded image.

    Args:
        data: Raw image bytes
        max_size_mb: Maximum size in MB (default: 10)
        field: Field name used in error messages

    Returns:
        Detected MIME type

    Raises:
        ValidationError: If the image is empty, too large or not a supported format
    """
    if not data:
        raise ValidationError(f"{field} is required")

    max_size_bytes = max_size_mb * 1024 * 1024
    if len(data) > max_size_bytes:
        raise ValidationError(
            f"{field} size ({len(data) / (1024 * 1024):.2f} MB) exceeds maximum "
            f"of {max_size_mb} MB"
        )

    mime = detect_image_mime(data)
    if mime is None:
        raise ValidationError(
            f"Invalid {field.lower()} format. Supported formats: JPEG, PNG, WEBP, GIF"
        )
    return mime


def decode_base64_image(
    encoded: str,
    max_size_mb: int = 10,
    field: str = "Image"
) -> bytes:
    """
    Decode a base64 image, optionally prefixed as a data URL.

    Args:
        encoded: Base64 string or 'data:image/...;base64,...' URL
        max_size_mb: Maximum decoded size in MB
        field: Field name used in error messages

    Returns:
        Raw image bytes

    Raises:
        ValidationError: If the payload is not valid base64 or not a supported image
    """
    if not encoded or not encoded.strip():
        raise ValidationError(f"{field} is required")

    payload = encoded.strip()
    if payload.startswith("data:"):
        _, sep, payload = payload.partition(",")
        if not sep:
            raise ValidationError(f"{field} data URL is malformed")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"{field} is not valid base64: {str(e)}") from e

    validate_image_bytes(data, max_size_mb=max_size_mb, field=field)
    return data


def image_to_data_url(data: bytes) -> str:
    """Encode image bytes as a base64 data URL (JPEG assumed when undetected)."""
    mime = detect_image_mime(data) or "image/jpeg"
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def validate_text(
    text: str,
    field: str,
    max_length: int = 2000
) -> str:
    """
    Validate caller-supplied free text (prompt, script).

    Args:
        text: Text to validate
        field: Field name used in error messages
        max_length: Maximum length in characters

    Returns:
        Stripped text

    Raises:
        ValidationError: If text is empty or too long
    """
    if not isinstance(text, str):
        raise ValidationError(f"{field} must be a string")

    stripped = text.strip()
    if not stripped:
        raise ValidationError(f"{field} is required")

    if len(stripped) > max_length:
        raise ValidationError(
            f"{field} must be at most {max_length} characters long "
            f"(got {len(stripped)} characters)"
        )
    return stripped


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """
    Flatten pydantic error details into one message.

    Args:
        errors: Items of a pydantic ValidationError's errors()

    Returns:
        Messages joined with '; ', each prefixed by its field path when it has one
    """
    messages = []
    for error in errors:
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        location = ".".join(
            str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")
        )
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)
