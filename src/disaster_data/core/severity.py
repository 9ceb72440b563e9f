"""
Severity scoring.

Two models exist. The composite model (default) gives each factor 0-5
points from its own bands, sums them and rescales the 0-15 total to
1-5. The threshold model takes the highest band reached by any factor.
"""

import math

from disaster_data.config import SeverityModel

# Lower bounds (exclusive) for 5, 4, 3, 2 and 1 points.
DEATH_BANDS: tuple[float, ...] = (10_000, 1_000, 100, 10, 0)
AFFECTED_BANDS: tuple[float, ...] = (1_000_000, 100_000, 10_000, 1_000, 0)
ECONOMIC_LOSS_BANDS: tuple[float, ...] = (1_000_000_000, 100_000_000, 10_000_000, 1_000_000, 0)

# The threshold model historically read damages one order of magnitude higher.
LEGACY_ECONOMIC_LOSS_BANDS: tuple[float, ...] = (10_000_000_000, 1_000_000_000, 100_000_000, 10_000_000, 0)

MAX_COMPONENT = 5
MAX_TOTAL = 3 * MAX_COMPONENT


def _clean(value: float | int | None) -> float:
    if value is None:
        return 0.0
    value = float(value)
    if math.isnan(value) or value < 0:
        return 0.0
    return value


def band_score(value: float | int | None, bands: tuple[float, ...]) -> int:
    """Points (0-5) for a value against descending exclusive lower bounds."""
    value = _clean(value)
    for points, bound in zip(range(MAX_COMPONENT, 0, -1), bands):
        if value > bound:
            return points
    return 0


def component_scores(
    deaths: float | int | None,
    affected: float | int | None,
    economic_loss_usd: float | int | None,
) -> tuple[int, int, int]:
    """Per-factor points for deaths, affected and economic loss."""
    return (
        band_score(deaths, DEATH_BANDS),
        band_score(affected, AFFECTED_BANDS),
        band_score(economic_loss_usd, ECONOMIC_LOSS_BANDS),
    )


def score(
    deaths: float | int | None,
    affected: float | int | None,
    economic_loss_usd: float | int | None,
) -> int:
    """
    Composite severity level in 1..5.

    ceil(total / 15 * 5), computed as ceil(total / 3) in integers so
    no rounding error can move a boundary. Events with no recorded
    impact still score 1.

    Examples:
        >>> score(15000, 0, 0)
        2
        >>> score(15000, 2_000_000, 5e9)
        5
    """
    total = sum(component_scores(deaths, affected, economic_loss_usd))
    level = -(-total * MAX_COMPONENT // MAX_TOTAL)
    return max(1, min(MAX_COMPONENT, level))


def score_threshold(
    deaths: float | int | None,
    affected: float | int | None,
    economic_loss_usd: float | int | None,
) -> int:
    """Legacy severity: the highest band reached by any single factor."""
    return max(
        1,
        band_score(deaths, DEATH_BANDS),
        band_score(affected, AFFECTED_BANDS),
        band_score(economic_loss_usd, LEGACY_ECONOMIC_LOSS_BANDS),
    )


def score_with(
    model: SeverityModel | str,
    deaths: float | int | None,
    affected: float | int | None,
    economic_loss_usd: float | int | None,
) -> int:
    """Score with the named model."""
    if SeverityModel(model) == SeverityModel.THRESHOLD:
        return score_threshold(deaths, affected, economic_loss_usd)
    return score(deaths, affected, economic_loss_usd)
