"""
Tests for validation utilities.
"""

import base64

import pytest

from shared.errors import ValidationError
from shared.validation import (
    decode_base64_image,
    detect_image_mime,
    format_validation_errors,
    image_to_data_url,
    validate_image_bytes,
    validate_text,
)


def test_detect_image_mime(jpeg_bytes, png_bytes):
    """Test signature sniffing."""
    assert detect_image_mime(jpeg_bytes) == "image/jpeg"
    assert detect_image_mime(png_bytes) == "image/png"
    assert detect_image_mime(b"GIF89a" + b"\x00" * 8) == "image/gif"
    assert detect_image_mime(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"
    assert detect_image_mime(b"%PDF-1.7") is None


def test_validate_image_bytes_valid(png_bytes):
    assert validate_image_bytes(png_bytes) == "image/png"


def test_validate_image_bytes_too_large(jpeg_bytes):
    """Test size limit."""
    data = jpeg_bytes + b"\x00" * (1024 * 1024)
    with pytest.raises(ValidationError, match="exceeds maximum"):
        validate_image_bytes(data, max_size_mb=1)


def test_validate_image_bytes_empty():
    with pytest.raises(ValidationError, match="Logo is required"):
        validate_image_bytes(b"", field="Logo")


def test_validate_image_bytes_unsupported():
    with pytest.raises(ValidationError, match="Supported formats"):
        validate_image_bytes(b"%PDF-1.7 not an image")


def test_decode_base64_plain_and_data_url(jpeg_bytes):
    """Test both payload shapes decode to the same bytes."""
    encoded = base64.b64encode(jpeg_bytes).decode("ascii")
    assert decode_base64_image(encoded) == jpeg_bytes
    assert decode_base64_image(f"data:image/jpeg;base64,{encoded}") == jpeg_bytes


def test_decode_base64_invalid():
    with pytest.raises(ValidationError, match="not valid base64"):
        decode_base64_image("@@@not-base64@@@")
    with pytest.raises(ValidationError, match="malformed"):
        decode_base64_image("data:image/png;base64")
    with pytest.raises(ValidationError, match="Image is required"):
        decode_base64_image("   ")


def test_image_to_data_url(png_bytes):
    url = image_to_data_url(png_bytes)
    assert url.startswith("data:image/png;base64,")
    assert image_to_data_url(b"unknown").startswith("data:image/jpeg;base64,")


def test_validate_text():
    """Test caller-supplied text checks."""
    assert validate_text("  Pour something special.  ", "Script") == "Pour something special."
    with pytest.raises(ValidationError, match="Script is required"):
        validate_text("   ", "Script")
    with pytest.raises(ValidationError, match="at most 10 characters"):
        validate_text("x" * 11, "Prompt", max_length=10)


def test_format_validation_errors():
    errors = [
        {"loc": ("body", "image"), "msg": "Field required"},
        {"loc": (), "msg": "Value error, Intro duration must be at least 0.5s, got 0.2s"},
        {"loc": ("text_overlays", 0, "end_time"), "msg": "Input should be greater than 0"},
    ]
    assert format_validation_errors(errors) == (
        "image: Field required; "
        "Intro duration must be at least 0.5s, got 0.2s; "
        "text_overlays.0.end_time: Input should be greater than 0"
    )
