"""
Starting direction for one robust extraction.

A random unit vector refined by a few ordinary (mean-based) power
iterations. Outliers may bias the seed; the robust loop that follows
corrects for that.
"""

import logging

import numpy as np

from grassmann.config import INIT_RANGE, INIT_REFINEMENT_STEPS, MAX_RESEEDS
from grassmann.deflate import normalize
from grassmann.errors import DegenerateSubspaceError

logger = logging.getLogger(__name__)


def random_unit_vector(
    n_features: int,
    rng: np.random.Generator,
    dtype=np.float64,
) -> np.ndarray:
    """Uniform draw in [-INIT_RANGE, INIT_RANGE)^D, scaled to unit norm."""
    mu = rng.random(n_features).astype(dtype) * (2 * INIT_RANGE) - INIT_RANGE
    return normalize(mu, where="random seed")


def power_refine(
    X: np.ndarray,
    mu: np.ndarray,
    n_steps: int = INIT_REFINEMENT_STEPS,
) -> np.ndarray:
    """mu <- normalize(X^T (X mu)), n_steps times."""
    for _ in range(n_steps):
        dots = X @ mu
        mu = normalize(dots @ X, where="initial")
    return mu


def initial_direction(
    X: np.ndarray,
    rng: np.random.Generator,
    max_reseeds: int = MAX_RESEEDS,
) -> np.ndarray:
    """
    Unit-norm starting direction biased toward high variance.

    The first attempt draws exactly one random vector, so seeded runs are
    reproducible. A seed orthogonal to the row space of X collapses during
    refinement; in that case a fresh seed is drawn, up to max_reseeds times.

    Raises
    ------
    DegenerateSubspaceError
        If every attempt collapses (e.g. X is all zeros).
    """
    n_features = X.shape[1]
    for attempt in range(max_reseeds + 1):
        mu = random_unit_vector(n_features, rng, dtype=X.dtype)
        try:
            return power_refine(X, mu)
        except DegenerateSubspaceError:
            if not np.any(X):
                raise
            logger.debug("initial direction collapsed (attempt %d), reseeding", attempt + 1)

    raise DegenerateSubspaceError(
        f"Degenerate subspace: initial direction collapsed after {max_reseeds + 1} seeds"
    )
