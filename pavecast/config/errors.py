class PavecastError(Exception):
    """Base exception for the projection and allocation engine."""
    pass

class ValidationError(PavecastError, ValueError):
    """Raised when numeric or categorical input violates an invariant."""
    pass

class PredictorError(PavecastError):
    """Raised by an alternate predictor when a one-step prediction fails."""
    pass
