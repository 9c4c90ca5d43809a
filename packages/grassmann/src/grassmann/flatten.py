"""
Flatten Grassmann results to parquet-ready rows.

compute_grassmann returns lists (iterations, convergence flags) and a
basis matrix. This module flattens everything into a single dict of
scalars per window, and stacks windows into a polars DataFrame.
"""

import numpy as np
from typing import Any, Dict, List


def flatten_result(
    result: Dict[str, Any],
    include_basis: bool = False,
) -> Dict[str, Any]:
    """
    Flatten a Grassmann result dict to scalar key-value pairs.

    Parameters
    ----------
    result : dict
        Output from compute_grassmann().
    include_basis : bool
        If True, include flattened basis loadings (n_features × K columns).

    Returns
    -------
    dict of {str: scalar} suitable for a parquet row.
    """
    row = {}

    # Window index if present
    if 'I' in result:
        row['I'] = result['I']

    if 'estimator' in result:
        row['estimator'] = str(result['estimator'])

    for key in ['n_observations', 'n_features', 'n_components', 'n_dropped']:
        val = result.get(key)
        if val is not None:
            row[key] = int(val)

    for k, n_iter in enumerate(result.get('n_iterations', [])):
        row[f'iterations_{k}'] = int(n_iter)

    for k, done in enumerate(result.get('converged', [])):
        row[f'converged_{k}'] = bool(done)

    scales = result.get('robust_scale')
    if scales is not None:
        for k, scale in enumerate(scales):
            row[f'robust_scale_{k}'] = float(scale)

    # Basis loadings (optional, produces many columns)
    if include_basis and result.get('basis') is not None:
        basis = np.asarray(result['basis'])
        n_feat, n_comp = basis.shape
        for k in range(n_comp):
            for j in range(n_feat):
                row[f'basis{k}_feat{j}'] = float(basis[j, k])

    return row


def flatten_batch(
    results: List[Dict[str, Any]],
    include_basis: bool = False,
) -> List[Dict[str, Any]]:
    """Flatten a list of Grassmann results."""
    return [flatten_result(r, include_basis) for r in results]


def to_frame(
    results: List[Dict[str, Any]],
    include_basis: bool = False,
):
    """Stack flattened results into a polars DataFrame, one row per result."""
    import polars as pl

    return pl.DataFrame(flatten_batch(results, include_basis))
