"""levelgraph: concept-graph merging and experience propagation."""

__version__ = "0.1.0"
