"""
Pytest configuration and fixtures.
"""

import pytest


@pytest.fixture
def test_env_file(tmp_path):
    """Create a temporary .env file for testing."""
    env_file = tmp_path / ".env"
    env_content = """
OPENAI_API_KEY=sk-test123456789012345678901234567890
REPLICATE_API_TOKEN=r8_test123456789012345678901234567890
ELEVENLABS_API_KEY=el-test-key
ENVIRONMENT=development
LOG_LEVEL=DEBUG
LOG_FORMAT=text
OUTPUT_PATH=~/Videos/ProductVideos
FFMPEG_BINARY=/usr/local/bin/ffmpeg
"""
    env_file.write_text(env_content)
    return env_file


@pytest.fixture
def mock_uuid():
    """Mock UUID for testing."""
    from uuid import UUID
    return UUID("550e8400-e29b-41d4-a716-446655440000")


@pytest.fixture
def jpeg_bytes():
    return b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.fixture
def png_bytes():
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
