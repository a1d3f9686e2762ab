"""
Candidate selectors for active-learning loops.
"""

from .selectors import identity_selector, graph_walk_selector
