"""
Shared utilities for the absorbingLP library.

- Custom exception hierarchy
- Logging configuration and performance timers
- Input validation for graphs, index sets and labels
"""

from .exceptions import (
    PropagationError,
    ValidationError,
    GraphConstructionError,
    ConfigurationError,
    ComputationError,
    validate_parameter,
    require_positive
)

from .validators import (
    validate_num_classes,
    validate_adjacency_matrix,
    validate_index_array,
    validate_labeled_set,
    find_duplicate_indices
)

from .logging_config import (
    setup_logging,
    get_logger,
    configure_external_library_logging,
    log_function_entry,
    log_performance_metric,
    LoggingTimer,
    JSONFormatter,
    PerformanceFilter
)
