"""
Random source helpers.

Every random draw in the renderer goes through an explicit
``numpy.random.Generator``. Independent streams for parallel callers are
derived from one seed through ``numpy.random.SeedSequence`` so that samples
stay uncorrelated.
"""

from __future__ import annotations
from typing import List, Optional
import numpy as np


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a random generator.

    Args:
        seed: Seed for reproducible output (None = fresh OS entropy)

    Returns:
        A PCG64-backed numpy Generator
    """
    return np.random.default_rng(seed)


def spawn_rngs(seed: Optional[int], count: int) -> List[np.random.Generator]:
    """Derive ``count`` statistically independent generators from one seed.

    Intended for callers that evaluate pixels or samples concurrently: give
    each worker its own stream instead of sharing one generator.
    """
    children = np.random.SeedSequence(seed).spawn(count)
    return [np.random.default_rng(child) for child in children]
