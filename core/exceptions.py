"""
Typed failures raised by the analysis engine.

Only structural problems are raised. Disagreement, outliers and degraded
detectors are normal operating conditions and are reported as data.
"""


class AuthenticityEngineError(Exception):
    """Base class for terminal analysis failures."""


class NoValidDetectorsError(AuthenticityEngineError):
    """Every detector observation reported status 'error'."""

    def __init__(self, detector_names=None):
        self.detector_names = list(detector_names or [])
        names = ", ".join(self.detector_names) or "none"
        super().__init__(f"All detectors failed, no fused score available (detectors: {names})")


class EmptyEnsembleError(AuthenticityEngineError):
    """No detector observations were supplied."""

    def __init__(self, message: str = "At least one detector observation is required"):
        super().__init__(message)
