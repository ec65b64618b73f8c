"""
Coarse attention grid over the image.

Each cell blends three deterministic signals:
- Baseline: one byte of the content hash, shifted by the cell index (x0.3)
- Regional: every source whose center lies within the influence radius of
  the cell center, with inverse-linear falloff (x0.7)
- Score bias: the fused score, uniform over the grid (x0.2)

The sum is clamped to [0, 1]; it is not a convex combination.
"""

import logging
from typing import List, Dict, Optional, Sequence, Tuple

import numpy as np

from core.data_models import AttentionHotspot, AttentionMap
from core.enums import AttentionDistribution

logger = logging.getLogger(__name__)


def generate_attention_map(
    content_hash: int,
    score: float,
    sources: Sequence[Tuple[float, float, float]],
    config: Optional[Dict] = None
) -> AttentionMap:
    """
    Build the attention grid, its hotspots and its distribution.

    Args:
        content_hash: Non-negative content hash
        score: Fused AI-likelihood score (0-1)
        sources: (center_x, center_y, strength) tuples in percent coordinates
        config: Configuration dict with an 'explainability' section

    Returns:
        AttentionMap
    """
    xai_config = (config or {}).get('explainability', {})
    grid_size = xai_config.get('grid_size', 5)
    radius = xai_config.get('influence_radius', 30.0)
    baseline_weight = xai_config.get('baseline_weight', 0.3)
    regional_weight = xai_config.get('regional_weight', 0.7)
    bias_weight = xai_config.get('score_bias_weight', 0.2)
    num_hotspots = xai_config.get('num_hotspots', 3)

    cell_size = 100.0 / grid_size
    grid = np.zeros((grid_size, grid_size))

    for row in range(grid_size):
        for col in range(grid_size):
            baseline = ((content_hash >> (row * grid_size + col)) & 0xFF) / 255.0

            cell_x = col * cell_size + cell_size / 2.0
            cell_y = row * cell_size + cell_size / 2.0
            regional = _regional_boost(cell_x, cell_y, sources, radius)

            value = baseline * baseline_weight + regional * regional_weight + score * bias_weight
            grid[row, col] = min(1.0, max(0.0, value))

    hotspots = _find_hotspots(grid, cell_size, num_hotspots)
    distribution = classify_distribution(grid)

    logger.debug(
        f"Attention map: range={grid.max() - grid.min():.3f}, "
        f"distribution={distribution.value}"
    )

    return AttentionMap(
        grid=tuple(tuple(float(v) for v in row) for row in grid),
        hotspots=tuple(hotspots),
        distribution=distribution,
    )


def _regional_boost(
    cell_x: float,
    cell_y: float,
    sources: Sequence[Tuple[float, float, float]],
    radius: float
) -> float:
    boost = 0.0
    for source_x, source_y, strength in sources:
        distance = float(np.hypot(source_x - cell_x, source_y - cell_y))
        if distance < radius:
            boost += strength * (1.0 - distance / radius)
    return boost


def _find_hotspots(grid: np.ndarray, cell_size: float, count: int) -> List[AttentionHotspot]:
    """Top cells by value; ties keep row-major order."""
    cells = [
        AttentionHotspot(
            x=col * cell_size + cell_size / 2.0,
            y=row * cell_size + cell_size / 2.0,
            value=float(grid[row, col]),
        )
        for row in range(grid.shape[0])
        for col in range(grid.shape[1])
    ]
    cells.sort(key=lambda c: c.value, reverse=True)
    return cells[:count]


def classify_distribution(grid: np.ndarray) -> AttentionDistribution:
    """
    Classify the grid by its value range (max - min).

    > 0.6 concentrated, > 0.3 distributed, else uniform.
    """
    spread = float(np.max(grid) - np.min(grid))

    if spread > 0.6:
        return AttentionDistribution.CONCENTRATED
    elif spread > 0.3:
        return AttentionDistribution.DISTRIBUTED
    return AttentionDistribution.UNIFORM
