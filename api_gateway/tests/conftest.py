"""
Pytest configuration and fixtures for API Gateway tests.

Remote services and the media tool are replaced with mocks that write
placeholder files, so a full pipeline run needs neither network nor ffmpeg.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

from api_gateway.orchestrator import PipelineOrchestrator
from modules.compositor.engine import CompositingEngine
from modules.content_generator.client import ContentGenerator
from modules.storage.files import StorageLayer
from modules.video_provider.factory import get_video_provider
from modules.voice_provider.openai_tts import OpenAITTSProvider
from shared.clients import ServiceClients
from shared.config import Settings

VIDEO_URL = "https://replicate.delivery/pbxt/abc/output.mp4"


def _write(path, data: bytes) -> Path:
    path = Path(path)
    path.write_bytes(data)
    return path


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the environment, writing under tmp_path."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test123456789012345678901234567890",
        replicate_api_token="r8_test123456789012345678901234567890",
        environment="test",
        output_path=tmp_path / "ProductVideos",
    )


@pytest.fixture
def clients(test_settings):
    return ServiceClients(test_settings, openai_client=MagicMock())


@pytest.fixture
def mock_content():
    """Content generator returning fixed text."""
    content = MagicMock(spec=ContentGenerator)
    content.identify_product = AsyncMock(return_value="Copper Tea Kettle")
    content.generate_video_prompt = AsyncMock(return_value="Slow orbit around a copper kettle")
    content.generate_script = AsyncMock(return_value="Crafted copper, made to last.")
    return content


@pytest.fixture
def mock_compositor():
    """Compositing engine whose operations write placeholder outputs."""
    compositor = MagicMock(spec=CompositingEngine)

    async def create_bumper(image_path, output_path, duration, width, height, fade_in=True, fade_out=True):
        return _write(output_path, b"bumper")

    async def concatenate(inputs, output_path):
        return _write(output_path, b"".join(Path(p).read_bytes() for p in inputs))

    async def merge_audio(video_path, audio_path, output_path):
        return _write(output_path, Path(video_path).read_bytes() + b"+audio")

    async def burn_text_overlays(video_path, overlays, output_path, theme=None):
        return _write(output_path, Path(video_path).read_bytes() + b"+text")

    compositor.probe_dimensions = AsyncMock(return_value=(1080, 1920))
    compositor.create_bumper = AsyncMock(side_effect=create_bumper)
    compositor.concatenate = AsyncMock(side_effect=concatenate)
    compositor.merge_audio = AsyncMock(side_effect=merge_audio)
    compositor.burn_text_overlays = AsyncMock(side_effect=burn_text_overlays)
    return compositor


@pytest.fixture
def mock_replicate():
    replicate = MagicMock()
    replicate.run = AsyncMock(return_value=VIDEO_URL)
    return replicate


@pytest.fixture
def mock_speech_client():
    client = MagicMock()
    client.audio.speech.create.return_value = Mock(content=b"ID3-voiceover")
    return client


@pytest.fixture
def storage(test_settings):
    storage = StorageLayer(test_settings.resolve_output_path())

    async def download_video(url, folder, filename):
        return _write(Path(folder) / filename, b"product-video")

    storage.download_video = AsyncMock(side_effect=download_video)
    return storage


@pytest.fixture
def orchestrator(clients, storage, mock_compositor, mock_content, mock_replicate, mock_speech_client):
    """Orchestrator wired to mocked collaborators and real providers."""
    return PipelineOrchestrator(
        clients,
        storage=storage,
        compositor=mock_compositor,
        content=mock_content,
        video_provider_factory=lambda t: get_video_provider(t, mock_replicate),
        voice_provider_factory=lambda t: OpenAITTSProvider(client=mock_speech_client),
    )
