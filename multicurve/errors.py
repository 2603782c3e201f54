"""Exceptions raised while configuring and building curves."""


class CurveBuildingError(Exception):
    """Base class for all curve construction errors."""


class ConfigurationError(CurveBuildingError, ValueError):
    """Raised when a builder call violates a configuration invariant.

    Covers redeclaration, missing prerequisite stages, mutually exclusive
    options, invalid arguments and non-positive solver settings.
    """


class StateError(CurveBuildingError, RuntimeError):
    """Raised when declared curves and configured nodes or types disagree."""


class UnsupportedOperationError(CurveBuildingError, NotImplementedError):
    """Raised when a calibration flavor cannot honour a request."""


class ConvergenceError(CurveBuildingError, RuntimeError):
    """Raised when the root finder fails to converge within its budget."""
