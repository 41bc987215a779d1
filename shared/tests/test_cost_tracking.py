"""
Tests for cost tracking.
"""

from decimal import Decimal

import pytest

from shared.cost_tracking import (
    PROMPT_GENERATION_COST,
    SCRIPT_GENERATION_COST,
    VISION_ANALYSIS_COST,
    CostBreakdown,
    calculate_costs,
    estimate_costs,
    usd_to_inr,
)
from shared.errors import ValidationError


def test_total_is_sum_of_items():
    breakdown = calculate_costs(
        video_cost=Decimal("0.60"),
        voiceover_cost=Decimal("0.000435"),
        product_identified=True,
        prompt_generated=True,
        script_generated=True,
    )

    assert breakdown.vision_analysis == VISION_ANALYSIS_COST
    assert breakdown.total == (
        breakdown.vision_analysis + breakdown.prompt_generation + breakdown.script_generation
        + breakdown.video_generation + breakdown.voiceover
    )
    assert breakdown.total == Decimal("0.630435")


def test_supplied_content_zeroes_line_items():
    breakdown = calculate_costs(
        video_cost=Decimal("0.27"),
        voiceover_cost=Decimal("0"),
        product_identified=False,
        prompt_generated=False,
        script_generated=False,
    )

    assert breakdown.vision_analysis == 0
    assert breakdown.prompt_generation == 0
    assert breakdown.script_generation == 0
    assert breakdown.total == Decimal("0.27")


def test_negative_cost_rejected():
    with pytest.raises(ValidationError, match="cannot be negative"):
        calculate_costs(Decimal("-1"), Decimal("0"), False, False, False)


def test_to_metadata_uses_floats():
    costs = CostBreakdown(video_generation=Decimal("0.6"), voiceover=Decimal("0.015")).to_metadata()
    assert costs.video_generation == pytest.approx(0.6)
    assert costs.total == pytest.approx(0.615)


def test_estimate_costs_for_fully_generated_run():
    breakdown = estimate_costs(
        video_provider="seedance-pro-fast",
        duration=10,
        resolution="1080p",
        script_length=2000,
        voice_provider="elevenlabs",
    )

    assert breakdown.video_generation == Decimal("0.60")
    assert breakdown.voiceover == Decimal("0.60")
    assert breakdown.prompt_generation == PROMPT_GENERATION_COST
    assert breakdown.script_generation == SCRIPT_GENERATION_COST
    assert breakdown.vision_analysis == VISION_ANALYSIS_COST


def test_estimate_costs_unknown_resolution_uses_default_tier():
    breakdown = estimate_costs("hailuo2", 6, "4k", 0, prompt_supplied=True, script_supplied=True)
    assert breakdown.video_generation == Decimal("0.270")


def test_estimate_costs_description_skips_identification():
    breakdown = estimate_costs("veo3-fast", 4, "720p", 0, product_description="Brass diya")
    assert breakdown.vision_analysis == 0
    assert breakdown.prompt_generation == PROMPT_GENERATION_COST


def test_usd_to_inr():
    assert usd_to_inr(Decimal("1.00")) == Decimal("85.00")
