"""
Core Grassmann decomposition.

Takes an observation matrix (n_observations × n_features) and extracts
n_components robust, mutually orthonormal basis directions, one at a time:

    initialize → robust average → store / deflate / reorthonormalize

Each extraction runs on the residual left by the previous one. The caller's
array is never modified; the driver owns a private working copy.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from grassmann.average import get_reducer, robust_average
from grassmann.config import DEFAULT_TRIM
from grassmann.deflate import accept_direction
from grassmann.errors import InvalidDimensionError, MissingInputError
from grassmann.initialize import initial_direction

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

def _prepare_data(X) -> Tuple[np.ndarray, int]:
    """Private floating copy of X with non-finite rows removed."""
    if X is None:
        raise MissingInputError("Missing required input: observation matrix X")

    X = np.asarray(X)
    if not np.issubdtype(X.dtype, np.floating):
        X = X.astype(np.float64)
    if X.ndim == 1:
        X = X.reshape(1, -1)
    if X.ndim != 2:
        raise ValueError(f"X must be 2D (n_observations, n_features), got shape {X.shape}")

    valid_mask = np.all(np.isfinite(X), axis=1)
    n_dropped = int(X.shape[0] - valid_mask.sum())
    if n_dropped:
        logger.warning("dropping %d observations with non-finite values", n_dropped)

    # Boolean indexing always copies
    X = X[valid_mask]
    if X.shape[0] == 0:
        raise ValueError("No finite observations in X")

    return X, n_dropped


def _check_n_components(n_components, n_features: int) -> int:
    if isinstance(n_components, (bool, np.bool_)) or not isinstance(n_components, (int, np.integer)):
        raise InvalidDimensionError(
            f"Invalid dimensionality: n_components must be an integer, got {n_components!r}"
        )
    if n_components <= 0 or n_components > n_features:
        raise InvalidDimensionError(
            f"Invalid dimensionality: n_components must be in 1..{n_features}, got {n_components}"
        )
    return int(n_components)


# ---------------------------------------------------------------------------
# Core computation
# ---------------------------------------------------------------------------

def compute_grassmann(
    X: np.ndarray,
    n_components: int = 1,
    estimator: str = 'median',
    trim: float = DEFAULT_TRIM,
    random_state=None,
) -> Dict[str, Any]:
    """
    Extract a robust orthonormal basis with diagnostics.

    Parameters
    ----------
    X : np.ndarray
        (n_observations, n_features) data. Rows with NaN/inf are dropped.
    n_components : int
        Number of basis vectors K, 1 <= K <= n_features.
    estimator : str
        'median' (Grassmann median), 'mean' (Grassmann average) or
        'trimmed' (trimmed Grassmann average).
    trim : float
        Tail fraction for the 'trimmed' estimator.
    random_state : None, int or np.random.Generator
        Source of the random seeds. Never touches global random state.

    Returns
    -------
    dict with:
        basis : np.ndarray — (n_features, K), orthonormal columns in extraction order
        n_iterations : list of int — robust-loop updates per component
        converged : list of bool — False where the iteration cap was hit
        robust_scale : np.ndarray — (K,) median |projection| of X onto each column
        estimator : str
        n_observations : int — rows actually used
        n_features : int
        n_components : int
        n_dropped : int — non-finite rows removed

    Raises
    ------
    MissingInputError
        X is None.
    InvalidDimensionError
        n_components is not an integer in 1..n_features.
    DegenerateSubspaceError
        A direction collapsed to zero norm (e.g. all-zero data).
    """
    X, n_dropped = _prepare_data(X)
    N, D = X.shape
    K = _check_n_components(n_components, D)
    get_reducer(estimator, trim)

    rng = np.random.default_rng(random_state)

    basis = np.full((D, K), np.nan, dtype=X.dtype)
    n_iterations: List[int] = []
    converged: List[bool] = []

    work = X
    for k in range(1, K + 1):
        mu = initial_direction(work, rng)
        mu, n_iter, done = robust_average(work, mu, estimator=estimator, trim=trim)
        work = accept_direction(basis, work, mu, k, K)

        n_iterations.append(n_iter)
        converged.append(done)
        logger.debug("component %d/%d: %d iterations, converged=%s", k, K, n_iter, done)

    robust_scale = np.median(np.abs(X @ basis), axis=0)

    return {
        'basis': basis,
        'n_iterations': n_iterations,
        'converged': converged,
        'robust_scale': robust_scale,
        'estimator': estimator,
        'n_observations': N,
        'n_features': D,
        'n_components': K,
        'n_dropped': n_dropped,
    }


def grassmann_median(
    X: np.ndarray,
    n_components: int = 1,
    random_state=None,
) -> np.ndarray:
    """
    Robust basis of the average subspace, via element-wise medians.

    grassmann_median(X) returns a (D, 1) basis for the average
    one-dimensional subspace spanned by the N×D data X.
    grassmann_median(X, K) returns a (D, K) matrix of orthonormal columns
    spanning a K-dimensional average subspace.
    """
    result = compute_grassmann(X, n_components, estimator='median', random_state=random_state)
    return result['basis']


def grassmann_average(
    X: np.ndarray,
    n_components: int = 1,
    estimator: str = 'mean',
    trim: float = DEFAULT_TRIM,
    random_state=None,
) -> np.ndarray:
    """(D, K) basis from the mean-based or trimmed Grassmann average."""
    result = compute_grassmann(
        X, n_components, estimator=estimator, trim=trim, random_state=random_state,
    )
    return result['basis']


def project(X: np.ndarray, basis: np.ndarray) -> np.ndarray:
    """Scores of each observation on each basis column: (N, D) @ (D, K)."""
    X = np.asarray(X)
    basis = np.asarray(basis)
    if basis.ndim == 1:
        basis = basis.reshape(-1, 1)
    if X.ndim == 1:
        X = X.reshape(1, -1)
    if X.shape[1] != basis.shape[0]:
        raise ValueError(
            f"X has {X.shape[1]} features but basis has {basis.shape[0]} rows"
        )
    return X @ basis


def compute_grassmann_batch(
    matrices: List[np.ndarray],
    window_indices: List[int],
    n_components: int = 1,
    estimator: str = 'median',
    trim: float = DEFAULT_TRIM,
    random_state=None,
    enforce_continuity: bool = True,
) -> List[Dict[str, Any]]:
    """
    Grassmann decomposition for a sequence of windows.

    Parameters
    ----------
    matrices : list of np.ndarray
        Each (n_observations, n_features), one per window.
    window_indices : list of int
        Window index (I) for each matrix.
    random_state : None, int or np.random.Generator
        One generator is shared by all windows, so a seed reproduces the batch.
    enforce_continuity : bool
        If True, flip basis columns to agree in sign with the previous window.

    Returns
    -------
    list of dict, one per window, each a compute_grassmann() result plus
    'I' key for the window index.
    """
    from grassmann.continuity import align_basis_signs

    if len(matrices) != len(window_indices):
        raise ValueError(
            f"Got {len(matrices)} matrices but {len(window_indices)} window indices"
        )

    rng = np.random.default_rng(random_state)

    results = []
    prev_basis: Optional[np.ndarray] = None

    for matrix, win_idx in zip(matrices, window_indices):
        result = compute_grassmann(
            matrix,
            n_components=n_components,
            estimator=estimator,
            trim=trim,
            random_state=rng,
        )
        result['I'] = win_idx

        if enforce_continuity:
            result['basis'] = align_basis_signs(result['basis'], prev_basis)
            prev_basis = result['basis']

        results.append(result)

    return results
