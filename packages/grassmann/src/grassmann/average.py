"""
Robust Grassmann averaging.

Fixed-point iteration for one basis direction:

    s   = sign(X mu)                      # sign(0) = 0
    mu  = reduce(s[:, None] * X, axis=0)  # element-wise, over observations
    mu  = mu / ||mu||

until max |mu - mu_prev| < tolerance or N iterations have run.

The reducer is the element-wise median by default (Grassmann median).
'mean' gives the plain Grassmann average and 'trimmed' the trimmed
Grassmann average. Hitting the iteration cap is not an error; the last
candidate is returned.

Reference: S. Hauberg, A. Feragen, M.J. Black.
"Grassmann Averages for Scalable Robust PCA". CVPR 2014.
"""

import logging
from typing import Callable, Optional, Tuple

import numpy as np

from grassmann.config import CONVERGENCE_TOLERANCE, DEFAULT_TRIM, ESTIMATORS
from grassmann.deflate import normalize

logger = logging.getLogger(__name__)


def _trimmed_mean(trim: float) -> Callable[[np.ndarray], np.ndarray]:
    from scipy.stats import trim_mean

    def reduce(values: np.ndarray) -> np.ndarray:
        return np.asarray(trim_mean(values, trim, axis=0), dtype=values.dtype)

    return reduce


def get_reducer(
    estimator: str = 'median',
    trim: float = DEFAULT_TRIM,
) -> Callable[[np.ndarray], np.ndarray]:
    """
    Element-wise reducer over the observation axis.

    Parameters
    ----------
    estimator : str
        'median', 'mean' or 'trimmed'.
    trim : float
        Fraction cut from each tail, only used by 'trimmed'. Must be in [0, 0.5).

    Returns
    -------
    Callable mapping an (N, D) array to a (D,) array.
    """
    if estimator == 'median':
        return lambda values: np.median(values, axis=0)
    if estimator == 'mean':
        return lambda values: np.mean(values, axis=0)
    if estimator == 'trimmed':
        if not 0.0 <= trim < 0.5:
            raise ValueError(f"trim must be in [0, 0.5), got {trim}")
        return _trimmed_mean(trim)
    raise ValueError(f"Unknown estimator: {estimator}. Available: {list(ESTIMATORS)}")


def grassmann_step(
    X: np.ndarray,
    mu: np.ndarray,
    reducer: Optional[Callable[[np.ndarray], np.ndarray]] = None,
) -> np.ndarray:
    """One update: re-sign every observation toward mu, reduce, normalize."""
    if reducer is None:
        reducer = get_reducer('median')
    dot_signs = np.sign(X @ mu)
    mu = reducer(X * dot_signs[:, np.newaxis])
    return normalize(mu, where="averaged")


def robust_average(
    X: np.ndarray,
    mu: np.ndarray,
    estimator: str = 'median',
    trim: float = DEFAULT_TRIM,
    max_iter: Optional[int] = None,
    tolerance: float = CONVERGENCE_TOLERANCE,
) -> Tuple[np.ndarray, int, bool]:
    """
    Run the Grassmann fixed-point iteration from a unit starting direction.

    Parameters
    ----------
    X : np.ndarray
        (N, D) working data, possibly deflated.
    mu : np.ndarray
        (D,) unit-norm starting direction.
    estimator : str
        Element-wise reducer, see get_reducer().
    trim : float
        Tail fraction for the 'trimmed' estimator.
    max_iter : int, optional
        Iteration cap. Defaults to N, the observation count.
    tolerance : float
        Early stop when the largest coordinate change falls below this.

    Returns
    -------
    (mu, n_iterations, converged)
        mu : (D,) unit-norm direction
        n_iterations : int — updates performed
        converged : bool — False when the cap was reached first
    """
    reducer = get_reducer(estimator, trim)
    if max_iter is None:
        max_iter = X.shape[0]

    n_iter = 0
    converged = False
    for n_iter in range(1, max_iter + 1):
        prev_mu = mu
        mu = grassmann_step(X, mu, reducer)
        if np.max(np.abs(mu - prev_mu)) < tolerance:
            converged = True
            break

    if not converged:
        logger.debug("%s average hit iteration cap (%d) without converging", estimator, max_iter)

    return mu, n_iter, converged
