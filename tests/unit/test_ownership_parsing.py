"""Ownership thresholding tests for raw per-point engine values."""

from __future__ import annotations

from hybridgo_service.estimation import count_ownership


def test_threshold_is_strict_on_both_sides() -> None:
    assert count_ownership([-1.0, -0.5, 0.5, 1.0, 0.2]) == {"black": 1, "white": 1, "dame": 3}


def test_custom_threshold() -> None:
    assert count_ownership([-0.3, 0.3], threshold=0.25) == {"black": 1, "white": 1, "dame": 0}


def test_empty_ownership_counts_nothing() -> None:
    assert count_ownership([]) == {"black": 0, "white": 0, "dame": 0}
