"""
absorbingLP - Partially absorbing label propagation for graph active learning.

This package estimates class-membership probabilities at unlabeled nodes of a
weighted graph from a few labeled nodes, by iterating a random walk in which
one absorbing pseudo-node per class captures the mass of labeled nodes. It is
meant to be called repeatedly from an active-learning loop, alongside the
candidate selectors in absorbingLP.selection.

Modules:
    common: Exceptions, logging configuration and input validation
    lp: The propagation engine, its options and graph adapters
    selection: Candidate selectors for active-learning loops
"""

__version__ = "0.1.0"

from .common.exceptions import (
    PropagationError,
    ValidationError,
    ConfigurationError,
    ComputationError,
    GraphConstructionError
)
from .common.logging_config import setup_logging, get_logger
from .lp import (
    PropagationOptions,
    label_propagation,
    get_propagation_info,
    adjacency_from_networkit,
    probabilities_to_dataframe
)
from .selection import identity_selector, graph_walk_selector

__all__ = [
    "PropagationError",
    "ValidationError",
    "ConfigurationError",
    "ComputationError",
    "GraphConstructionError",
    "setup_logging",
    "get_logger",
    "PropagationOptions",
    "label_propagation",
    "get_propagation_info",
    "adjacency_from_networkit",
    "probabilities_to_dataframe",
    "identity_selector",
    "graph_walk_selector",
]
