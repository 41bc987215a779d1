"""
Unit tests for video providers.
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

from modules.video_provider.base import VideoGenerationParams
from modules.video_provider.factory import (
    get_all_video_providers,
    get_provider_info,
    get_video_provider,
)
from modules.video_provider.hailuo2 import Hailuo2Provider
from modules.video_provider.seedance_pro_fast import SeedanceProFastProvider
from modules.video_provider.veo3_fast import Veo3FastProvider
from shared.errors import ConfigError, UnexpectedOutputError, ValidationError
from shared.models.generation import VideoProviderType

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def _params(**overrides) -> VideoGenerationParams:
    values = {"prompt": "A copper kettle on a marble counter", "duration": 6, "aspect_ratio": "9:16"}
    values.update(overrides)
    return VideoGenerationParams(**values)


def _replicate(output="https://replicate.delivery/video.mp4") -> Mock:
    replicate = Mock()
    replicate.run = AsyncMock(return_value=output)
    return replicate


class TestVeo3FastValidation:
    """Test Veo 3 Fast capability envelope."""

    @pytest.mark.parametrize("duration", [4, 6, 8])
    @pytest.mark.parametrize("aspect_ratio", ["16:9", "9:16"])
    @pytest.mark.parametrize("resolution", ["720p", "1080p"])
    def test_accepts_envelope(self, duration, aspect_ratio, resolution):
        result = Veo3FastProvider().validate(
            _params(duration=duration, aspect_ratio=aspect_ratio, resolution=resolution)
        )
        assert result.valid
        assert result.errors == []

    @pytest.mark.parametrize("duration", [2, 5, 10])
    def test_rejects_unsupported_duration(self, duration):
        result = Veo3FastProvider().validate(_params(duration=duration))
        assert not result.valid
        assert result.errors == ["Duration must be one of: 4, 6, 8 seconds"]

    def test_rejects_square_aspect_ratio(self):
        result = Veo3FastProvider().validate(_params(aspect_ratio="1:1"))
        assert result.errors == ["Aspect ratio must be one of: 16:9, 9:16"]

    def test_rejects_unsupported_resolution(self):
        result = Veo3FastProvider().validate(_params(resolution="480p"))
        assert result.errors == ["Resolution must be one of: 720p, 1080p"]

    def test_reports_every_violation(self):
        result = Veo3FastProvider().validate(
            _params(duration=3, aspect_ratio="4:3", resolution="4k")
        )
        assert len(result.errors) == 3


class TestHailuo2Validation:
    """Test Hailuo 2 capability envelope."""

    @pytest.mark.parametrize("duration,resolution", [
        (6, "512p"), (6, "768p"), (6, "1080p"), (10, "512p"), (10, "768p"),
    ])
    @pytest.mark.parametrize("aspect_ratio", ["16:9", "9:16", "1:1"])
    def test_accepts_envelope(self, duration, resolution, aspect_ratio):
        result = Hailuo2Provider().validate(
            _params(duration=duration, resolution=resolution, aspect_ratio=aspect_ratio)
        )
        assert result.valid

    @pytest.mark.parametrize("duration", [4, 8, 12])
    def test_rejects_unsupported_duration(self, duration):
        result = Hailuo2Provider().validate(_params(duration=duration))
        assert result.errors == ["Duration must be one of: 6, 10 seconds"]

    def test_rejects_1080p_at_10_seconds(self):
        result = Hailuo2Provider().validate(_params(duration=10, resolution="1080p"))
        assert not result.valid
        assert result.errors == [
            "10-second videos are only available at 512p and 768p resolutions "
            "(1080p not supported for 10s)"
        ]

    def test_rejects_unsupported_resolution(self):
        result = Hailuo2Provider().validate(_params(resolution="720p"))
        assert result.errors == ["Resolution must be one of: 512p, 768p, 1080p"]


class TestSeedanceValidation:
    """Test Seedance Pro Fast capability envelope."""

    @pytest.mark.parametrize("duration", list(range(2, 13)))
    def test_accepts_every_duration_in_range(self, duration):
        assert SeedanceProFastProvider().validate(_params(duration=duration)).valid

    @pytest.mark.parametrize("duration", [0, 1, 13, 20])
    def test_rejects_duration_outside_range(self, duration):
        result = SeedanceProFastProvider().validate(_params(duration=duration))
        assert result.errors == ["Duration must be between 2 and 12 seconds"]

    @pytest.mark.parametrize("resolution", ["480p", "720p", "1080p"])
    def test_accepts_resolutions(self, resolution):
        assert SeedanceProFastProvider().validate(_params(resolution=resolution)).valid

    def test_rejects_unsupported_aspect_ratio(self):
        result = SeedanceProFastProvider().validate(_params(aspect_ratio="21:9"))
        assert result.errors == ["Aspect ratio must be one of: 16:9, 9:16, 1:1"]


class TestPricing:
    """Test provider cost calculation."""

    def test_veo3_flat_rate(self):
        provider = Veo3FastProvider()
        assert provider.cost_per_video(6) == Decimal("0.60")
        assert provider.cost_per_video(8, "720p") == Decimal("0.80")

    @pytest.mark.parametrize("resolution,expected", [
        ("512p", Decimal("0.150")), ("768p", Decimal("0.270")), ("1080p", Decimal("0.48")),
    ])
    def test_hailuo2_tiers(self, resolution, expected):
        assert Hailuo2Provider().cost_per_video(6, resolution) == expected

    def test_unknown_resolution_uses_default_tier(self):
        assert Hailuo2Provider().cost_per_video(6, "4k") == Decimal("0.270")
        assert SeedanceProFastProvider().cost_per_video(4, "4k") == Decimal("0.100")
        assert SeedanceProFastProvider().cost_per_video(4) == Decimal("0.100")

    def test_seedance_tiers(self):
        provider = SeedanceProFastProvider()
        assert provider.cost_per_video(10, "480p") == Decimal("0.150")
        assert provider.cost_per_video(10, "1080p") == Decimal("0.60")

    def test_generation_time_estimates(self):
        assert Veo3FastProvider().estimate_generation_time(6) == 90
        assert Hailuo2Provider().estimate_generation_time(10) == 75
        assert SeedanceProFastProvider().estimate_generation_time(2) == 60


class TestGenerateVideo:
    """Test remote generation calls."""

    @pytest.mark.asyncio
    async def test_veo3_omits_aspect_ratio_with_image(self):
        replicate = _replicate()
        provider = Veo3FastProvider(replicate)

        url = await provider.generate_video(_params(image=PNG_BYTES, seed=42))

        assert url == "https://replicate.delivery/video.mp4"
        model_id, model_input = replicate.run.call_args.args
        assert model_id == "google/veo-3-fast"
        assert "aspect_ratio" not in model_input
        assert model_input["image"].startswith("data:image/png;base64,")
        assert model_input["generate_audio"] is False
        assert model_input["resolution"] == "1080p"
        assert model_input["seed"] == 42

    @pytest.mark.asyncio
    async def test_veo3_sends_aspect_ratio_without_image(self):
        replicate = _replicate()
        await Veo3FastProvider(replicate).generate_video(_params(aspect_ratio="16:9"))

        _, model_input = replicate.run.call_args.args
        assert model_input["aspect_ratio"] == "16:9"
        assert "image" not in model_input
        assert "seed" not in model_input

    @pytest.mark.asyncio
    async def test_hailuo2_uses_first_frame_image_and_no_aspect_ratio(self):
        replicate = _replicate()
        await Hailuo2Provider(replicate).generate_video(_params(image=PNG_BYTES))

        model_id, model_input = replicate.run.call_args.args
        assert model_id == "minimax/hailuo-02"
        assert "first_frame_image" in model_input
        assert "image" not in model_input
        assert "aspect_ratio" not in model_input
        assert model_input["resolution"] == "768p"

    @pytest.mark.asyncio
    async def test_hailuo2_never_sends_aspect_ratio(self):
        replicate = _replicate()
        await Hailuo2Provider(replicate).generate_video(_params(aspect_ratio="1:1"))

        _, model_input = replicate.run.call_args.args
        assert "aspect_ratio" not in model_input

    @pytest.mark.asyncio
    async def test_seedance_omits_aspect_ratio_with_image(self):
        replicate = _replicate()
        await SeedanceProFastProvider(replicate).generate_video(
            _params(duration=5, image=PNG_BYTES)
        )

        model_id, model_input = replicate.run.call_args.args
        assert model_id == "bytedance/seedance-1-pro-fast"
        assert "aspect_ratio" not in model_input
        assert model_input["duration"] == 5
        assert model_input["resolution"] == "720p"

    @pytest.mark.asyncio
    async def test_invalid_params_raise_before_remote_call(self):
        replicate = _replicate()
        provider = Hailuo2Provider(replicate)

        with pytest.raises(ValidationError) as exc_info:
            await provider.generate_video(_params(duration=10, resolution="1080p", aspect_ratio="4:3"))

        assert str(exc_info.value).startswith("Invalid parameters: ")
        assert "Aspect ratio must be one of" in str(exc_info.value)
        assert "10-second videos" in str(exc_info.value)
        replicate.run.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("output", [
        ["https://replicate.delivery/video.mp4"],
        {"url": "https://replicate.delivery/video.mp4"},
        None,
    ])
    async def test_non_string_output_is_rejected(self, output):
        provider = Veo3FastProvider(_replicate(output=output))

        with pytest.raises(UnexpectedOutputError, match="Unexpected output format from Google Veo 3 Fast"):
            await provider.generate_video(_params())

    @pytest.mark.asyncio
    async def test_missing_client_raises_config_error(self):
        with pytest.raises(ConfigError):
            await Veo3FastProvider().generate_video(_params())


class TestFactory:
    """Test provider factory."""

    @pytest.mark.parametrize("provider_type,cls", [
        ("veo3-fast", Veo3FastProvider),
        ("hailuo2", Hailuo2Provider),
        (VideoProviderType.SEEDANCE_PRO_FAST, SeedanceProFastProvider),
    ])
    def test_resolves_known_types(self, provider_type, cls):
        assert isinstance(get_video_provider(provider_type), cls)

    def test_unknown_type_raises(self):
        with pytest.raises(ValidationError, match="Unknown video provider"):
            get_video_provider("kling-v2.5-turbo")

    def test_all_providers(self):
        names = [p.name for p in get_all_video_providers()]
        assert names == ["Google Veo 3 Fast", "Hailuo 2", "Seedance 1 Pro Fast"]

    def test_provider_info(self):
        info = get_provider_info("seedance-pro-fast")
        assert info["id"] == "seedance-pro-fast"
        assert info["tier"] == "ultra-budget"
        assert info["cost_per_second"] == "Variable by resolution"
        assert info["estimated_time"] == "~60s"
        assert info["capabilities"]["supported_durations"] == list(range(2, 13))

        veo = get_provider_info("veo3-fast")
        assert veo["cost_per_second"] == "$0.10/sec"
        assert veo["capabilities"]["supported_durations"] == [4, 6, 8]
