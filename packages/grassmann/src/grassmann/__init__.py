"""
Grassmann averaging package.

Robust estimate of the dominant linear subspace of a data set.
Input: observation matrix (n_observations × n_features).
Output: (n_features × K) orthonormal basis, one direction per column.

Each direction is the fixed point of an average over sign-aligned
observations. With element-wise medians (the default) a minority of
extreme observations cannot pull the basis away from the bulk of the
data, unlike ordinary PCA.
"""

from grassmann.decompose import (
    compute_grassmann,
    compute_grassmann_batch,
    grassmann_average,
    grassmann_median,
    project,
)
from grassmann.continuity import align_basis_signs
from grassmann.errors import (
    DegenerateSubspaceError,
    GrassmannError,
    InvalidDimensionError,
    MissingInputError,
)
from grassmann.flatten import flatten_result, flatten_batch, to_frame

__all__ = [
    'compute_grassmann',
    'compute_grassmann_batch',
    'grassmann_average',
    'grassmann_median',
    'project',
    'align_basis_signs',
    'DegenerateSubspaceError',
    'GrassmannError',
    'InvalidDimensionError',
    'MissingInputError',
    'flatten_result',
    'flatten_batch',
    'to_frame',
]
