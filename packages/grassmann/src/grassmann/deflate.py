"""
Deflation and reorthonormalization.

After a direction is accepted it is stored in the basis and, unless it is
the last one requested, removed from the working data so the next
extraction sees only the residual.

Policy by position k (1-indexed) out of K requested:
    k == 1       store as-is, deflate data
    1 < k < K    reorthogonalize against columns 1..k-1, store, deflate data
    k == K > 1   reorthogonalize, store, keep data

The first vector needs no reorthogonalization. Later ones do, because
numerical drift reintroduces small components along earlier directions
that deflation alone does not remove.
"""

import logging

import numpy as np

from grassmann.config import REORTH_ALPHA, REORTH_MAX_PASSES
from grassmann.errors import DegenerateSubspaceError

logger = logging.getLogger(__name__)


def normalize(vector: np.ndarray, where: str = "candidate") -> np.ndarray:
    """Scale to unit Euclidean norm; zero or non-finite norm is degenerate."""
    norm = np.linalg.norm(vector)
    if not np.isfinite(norm) or norm == 0:
        raise DegenerateSubspaceError(
            f"Degenerate subspace: {where} direction has zero norm"
        )
    return vector / norm


def deflate(X: np.ndarray, mu: np.ndarray) -> np.ndarray:
    """
    Remove each observation's component along unit vector mu.

    Returns a new (N, D) array X - (X mu) mu^T. X is not modified.
    """
    return X - np.outer(X @ mu, mu)


def reorthogonalize(
    basis: np.ndarray,
    mu: np.ndarray,
    alpha: float = REORTH_ALPHA,
    max_passes: int = REORTH_MAX_PASSES,
) -> np.ndarray:
    """
    Project mu out of the span of the columns of basis.

    Iterated modified Gram-Schmidt: one pass always, further passes while
    the norm keeps shrinking below alpha times its previous value. If that
    is still the case after max_passes, mu lies (numerically) inside the
    span and no new direction exists.

    Parameters
    ----------
    basis : np.ndarray
        (D, k) matrix with orthonormal columns. k may be 0.
    mu : np.ndarray
        (D,) candidate direction.

    Returns
    -------
    np.ndarray
        (D,) vector orthogonal to every column of basis. NOT renormalized.
    """
    r = np.array(mu, copy=True)
    if basis.shape[1] == 0:
        return r

    norm_old = np.linalg.norm(r)
    for n_pass in range(1, max_passes + 1):
        for j in range(basis.shape[1]):
            q = basis[:, j]
            r -= np.dot(q, r) * q
        norm_new = np.linalg.norm(r)
        if norm_new == 0:
            break
        if norm_new >= alpha * norm_old:
            if n_pass > 1:
                logger.debug("reorthogonalization needed %d passes", n_pass)
            return r
        norm_old = norm_new

    raise DegenerateSubspaceError(
        "Degenerate subspace: candidate lies in the span of previous basis vectors"
    )


def accept_direction(
    basis: np.ndarray,
    X: np.ndarray,
    mu: np.ndarray,
    k: int,
    n_components: int,
) -> np.ndarray:
    """
    Store direction k (1-indexed) in basis[:, k-1] and return the residual data.

    basis is filled in place. The returned data is a new deflated array,
    or X itself when k is the last requested component.
    """
    if k == 1:
        basis[:, 0] = mu
        if n_components == 1:
            return X
        return deflate(X, mu)

    mu = normalize(reorthogonalize(basis[:, :k - 1], mu), where=f"component {k}")
    basis[:, k - 1] = mu

    if k < n_components:
        return deflate(X, mu)
    return X
