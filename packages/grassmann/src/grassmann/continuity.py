"""
Basis sign continuity across windows.

A Grassmann direction is only defined up to sign: both mu and -mu span the
same subspace, and the random seed decides which one comes out. When basis
vectors are tracked across windows (or compared across runs), flip each
column so it points the same way as its predecessor.

Method: dot product between matching columns. If negative, flip.
"""

import numpy as np


def align_basis_signs(
    basis_current: np.ndarray,
    basis_previous: np.ndarray,
) -> np.ndarray:
    """
    Flip columns of basis_current that point away from basis_previous.

    Parameters
    ----------
    basis_current : np.ndarray
        (D, K) basis, columns are directions. A (D,) vector is also accepted.
    basis_previous : np.ndarray
        Reference basis of the same shape, or None.

    Returns
    -------
    np.ndarray
        Copy of basis_current with consistent signs. Returned unchanged when
        there is no reference or the shapes differ.
    """
    if basis_previous is None:
        return basis_current

    if basis_current.shape != basis_previous.shape:
        return basis_current

    corrected = basis_current.copy()

    if corrected.ndim == 1:
        if np.dot(corrected, basis_previous) < 0:
            corrected *= -1
        return corrected

    for k in range(corrected.shape[1]):
        if np.dot(basis_previous[:, k], corrected[:, k]) < 0:
            corrected[:, k] *= -1

    return corrected
