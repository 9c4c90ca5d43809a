"""Error types raised by the Grassmann drivers."""


class GrassmannError(ValueError):
    """Base class for Grassmann averaging failures."""


class MissingInputError(GrassmannError):
    """The observation matrix was not supplied."""


class InvalidDimensionError(GrassmannError):
    """Requested number of components is not in 1..D."""


class DegenerateSubspaceError(GrassmannError):
    """A candidate direction collapsed to zero norm and cannot be normalized."""
