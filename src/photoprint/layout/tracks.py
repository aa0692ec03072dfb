"""
Module: layout.tracks

Purpose:
    Fractional track sizing for user-driven column/row resize.
    Converts pointer-drag deltas (px) into normalized fractions.

Key Functions:
    - resize_tracks(): Apply a drag on one boundary
    - boundary_positions(): Pixel positions of the resize handles
    - track_lengths(): Fractions -> physical lengths (used by export)

Algorithm:
    1. available = container - (count - 1) * gap
    2. delta fraction = delta_px / available
    3. Add to track i-1, subtract from track i, clamp both into
       [min_fraction, 1 - min_fraction]
    4. Divide EVERY entry by the new sum (clamping can perturb the total)

Dependencies:
    - core.grid_config: MIN_FRACTION, TRACK_GAP_PX

Used By:
    - editor.operations.resize_track
    - output.compositor: Physical track lengths
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from photoprint.core.grid_config import MIN_FRACTION, TRACK_GAP_PX

logger = logging.getLogger(__name__)


def uniform_fractions(count: int) -> Tuple[float, ...]:
    """
    Equal fractions for count tracks.

    Example:
        >>> uniform_fractions(4)
        (0.25, 0.25, 0.25, 0.25)
    """
    count = max(1, count)
    return tuple(1.0 / count for _ in range(count))


def normalize_fractions(sizes: Sequence[float]) -> Tuple[float, ...]:
    """
    Divide every entry by the total so the array sums to 1.0.

    A non-positive total (degenerate input) yields uniform fractions.
    """
    total = sum(sizes)
    if total <= 0:
        return uniform_fractions(len(sizes))
    return tuple(size / total for size in sizes)


def available_space(container_size: float, track_count: int, gap: float = TRACK_GAP_PX) -> float:
    """Space left for tracks once the inter-track gaps are removed."""
    return container_size - (track_count - 1) * gap


def resize_tracks(
    sizes: Sequence[float],
    boundary: int,
    delta_px: float,
    container_size: float,
    *,
    gap: float = TRACK_GAP_PX,
    min_fraction: float = MIN_FRACTION,
) -> Tuple[float, ...]:
    """
    Move the boundary between track boundary-1 and boundary by delta_px.

    Args:
        sizes: Starting fractions (one per track)
        boundary: Index of the track right of / below the dragged boundary
        delta_px: Pointer movement in pixels (positive grows track boundary-1)
        container_size: Measured container size along the axis in pixels
        gap: Inter-track gap in pixels
        min_fraction: Smallest fraction a touched track may shrink to

    Returns:
        New fractions summing to 1.0. The input (as a tuple) is returned
        unchanged for a drag that cannot apply: unmeasured container,
        boundary out of range, or fewer than two tracks.

    Example:
        >>> resize_tracks((0.5, 0.5), 1, 100.0, 200.0, gap=0)
        (0.95, 0.05)
    """
    sizes = tuple(sizes)
    count = len(sizes)
    if count < 2 or not 1 <= boundary < count:
        logger.debug(f"Ignoring resize on boundary {boundary} of {count} tracks")
        return sizes

    available = available_space(container_size, count, gap)
    if available <= 0:
        logger.debug(f"Ignoring resize: container not measured ({container_size}px)")
        return sizes

    delta = delta_px / available
    max_fraction = 1.0 - min_fraction

    updated = list(sizes)
    updated[boundary - 1] = _clamp(sizes[boundary - 1] + delta, min_fraction, max_fraction)
    updated[boundary] = _clamp(sizes[boundary] - delta, min_fraction, max_fraction)

    return normalize_fractions(updated)


def boundary_positions(
    sizes: Sequence[float],
    container_size: float,
    gap: float = TRACK_GAP_PX,
) -> List[float]:
    """
    Pixel offsets of the inner boundaries (resize handles).

    Each position is the cumulative pixel size of the tracks before the
    boundary, plus the gaps already crossed, plus half of the gap the
    handle sits in.

    Returns:
        len(sizes) - 1 positions, or [] when the container is unmeasured
    """
    count = len(sizes)
    available = available_space(container_size, count, gap)
    if count < 2 or available <= 0:
        return []

    positions: List[float] = []
    running = 0.0
    for index in range(1, count):
        running += sizes[index - 1] * available
        positions.append(running + (index - 1) * gap + gap / 2)
    return positions


def track_lengths(
    sizes: Optional[Sequence[float]],
    count: int,
    total: float,
) -> List[float]:
    """
    Convert fractions to physical lengths along one axis.

    Falls back to uniform tracks when sizes is missing or does not match
    count. count is guarded to at least 1 so a degenerate page never
    divides by zero.
    """
    count = max(1, count)
    if not sizes or len(sizes) != count:
        return [total / count] * count
    return [fraction * total for fraction in sizes]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
