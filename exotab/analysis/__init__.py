from .correlations import (
    CorrelationError,
    CorrelationMatrix,
    CorrelationMethod,
    TargetCorrelation,
    generate_correlation_matrix,
    rank_target_correlations,
)

__all__ = [
    "CorrelationError",
    "CorrelationMatrix",
    "CorrelationMethod",
    "TargetCorrelation",
    "generate_correlation_matrix",
    "rank_target_correlations",
]
