"""Pydantic models for data handed over by external collaborators."""

from levelgraph.models.analysis import EntryAnalysis, GeneralizationLink, WeightedAction

__all__ = [
    "EntryAnalysis",
    "GeneralizationLink",
    "WeightedAction",
]
