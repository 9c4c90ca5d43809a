"""
Grassmann Configuration
=======================
Internal constants for the Grassmann averaging iteration.
Single source of truth. These are fixed by the published method and are
NOT runtime options: changing them breaks parity with the reference results.

Usage:
    from grassmann.config import CONFIG
    tol = CONFIG['average']['tolerance']
"""

# Stop the fixed-point loop once max |mu - mu_prev| drops below this.
CONVERGENCE_TOLERANCE = 1e-5

# Mean-based power iterations used to seed each robust extraction.
INIT_REFINEMENT_STEPS = 3

# Random seed components are drawn uniformly in [-INIT_RANGE, INIT_RANGE).
INIT_RANGE = 0.5

# Extra random seeds tried when refinement collapses to a zero vector.
MAX_RESEEDS = 3

# Iterated Gram-Schmidt: repeat while the norm shrinks below ALPHA * previous.
REORTH_ALPHA = 0.5
REORTH_MAX_PASSES = 4

# Fraction cut from each tail by the trimmed estimator.
DEFAULT_TRIM = 0.25

ESTIMATORS = ('median', 'mean', 'trimmed')

CONFIG = {

    # =================================================================
    # Initialization (random seed + power iteration)
    # =================================================================
    'initialize': {
        'refinement_steps': INIT_REFINEMENT_STEPS,
        'init_range': INIT_RANGE,
        'max_reseeds': MAX_RESEEDS,
    },

    # =================================================================
    # Robust averaging loop
    # =================================================================
    'average': {
        'tolerance': CONVERGENCE_TOLERANCE,
        'default_estimator': 'median',
        'estimators': ESTIMATORS,
        'default_trim': DEFAULT_TRIM,
        # Iteration cap is the observation count N (not configurable)
    },

    # =================================================================
    # Reorthonormalization
    # =================================================================
    'reorth': {
        'alpha': REORTH_ALPHA,
        'max_passes': REORTH_MAX_PASSES,
    },
}
