"""
Exception hierarchy for the exotab pipeline.

Every error carries a human readable ``message`` and a ``details`` dict so
callers can render inline feedback without parsing strings.
"""

from typing import Any, Dict, List, Optional


class ExotabError(Exception):
    """Base exception for exotab errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DataLoadError(ExotabError):
    """Raised when CSV text, a file or a URL cannot be turned into a Dataset."""
    pass


class ConfigurationError(ExotabError):
    """Raised for values no configuration model can accept (e.g. unknown method)."""
    pass


class PreconditionError(ExotabError):
    """Raised when an operation is asked to run on data it cannot handle."""
    pass


class TrainingPreconditionError(PreconditionError):
    """Raised when the target or feature columns needed for training are missing."""
    def __init__(self, message: str, missing_columns: Optional[List[str]] = None, details: Optional[Dict[str, Any]] = None):
        self.missing_columns = list(missing_columns or [])
        merged = dict(details or {})
        merged.setdefault("missing_columns", self.missing_columns)
        super().__init__(message, merged)


class PipelineError(ExotabError):
    """
    Wraps an unexpected failure at the outer boundary of a pipeline call.

    ``operation`` names the call that failed and ``details`` carries the
    size of the input it was working on.
    """
    def __init__(self, operation: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.operation = operation
        merged = {"operation": operation}
        merged.update(details or {})
        super().__init__(f"{operation} failed: {message}", merged)


class CleaningError(PipelineError):
    pass


class TrainingError(PipelineError):
    pass
