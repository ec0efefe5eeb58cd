"""
Error Types
===========

All failures in the framework are usage errors reported synchronously
to the caller. Each class also derives from the matching builtin so
callers can keep catching ``ValueError`` / ``IndexError``.
"""


class QNNError(Exception):
    """Base class for framework errors"""


class ConfigurationError(QNNError, ValueError):
    """Invalid neuron or circuit configuration (fatal at construction)"""


class ShapeError(QNNError, ValueError):
    """Input, parameter or gradient vector of the wrong length"""


class QubitIndexError(QNNError, IndexError):
    """Qubit index outside the register"""


class FrozenStateError(QNNError, RuntimeError):
    """Attempt to mutate a read-only state snapshot"""


__all__ = [
    'QNNError',
    'ConfigurationError',
    'ShapeError',
    'QubitIndexError',
    'FrozenStateError',
]
