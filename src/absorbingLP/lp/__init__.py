"""
Partially absorbing label propagation.

- Row normalization of the input graph
- Graph augmentation with one absorbing pseudo-node per class
- Uniform or Dirichlet-smoothed empirical prior
- Fixed-horizon belief propagation with optional early stopping
- Adapters for NetworkIt graphs and a Polars view of the results
"""

# Core propagation functions
from .propagation import (
    label_propagation,
    get_propagation_info,
    normalize_rows,
    compute_prior,
    summarize_training_labels,
    build_augmented_graph,
    initialize_beliefs,
    propagate_beliefs
)

from .options import PropagationOptions
from .builder import SparseMatrixBuilder
from .graphs import adjacency_from_networkit, as_sparse_adjacency
from .results import probabilities_to_dataframe
