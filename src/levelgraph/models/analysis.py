"""Pydantic models for the structured entry analysis.

An analysis decomposes one journal entry into the three concept layers
(actions, skills, characteristics) plus an optional generalization chain
leading towards the progression root. It is the only shape in which the
analysis collaborator hands data to this package.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class WeightedAction(BaseModel):
    """One action performed during the entry and its share of the effort."""

    label: str = Field(min_length=1, description="Action name, e.g. 'Debugging'")
    weight: float = Field(description="Relative proportion of the entry's effort")


class GeneralizationLink(BaseModel):
    """Explicit child -> parent relationship between two concepts."""

    child: str = Field(min_length=1, description="More specific concept")
    parent: str = Field(min_length=1, description="More abstract concept")
    weight: float = Field(description="Proportion of the child attributed to the parent")


class EntryAnalysis(BaseModel):
    """Structured decomposition of a journal entry.

    Weights are advisory: nothing here enforces that action weights sum to 1.0.
    """

    duration_minutes: int = Field(ge=1, description="Estimated duration in minutes")
    weighted_actions: list[WeightedAction] = Field(default_factory=list)
    skill_mappings: list[GeneralizationLink] = Field(
        default_factory=list, description="Action -> skill links"
    )
    characteristic_mappings: list[GeneralizationLink] = Field(
        default_factory=list, description="Skill -> characteristic links"
    )
    generalization_chain: list[GeneralizationLink] = Field(
        default_factory=list, description="Characteristic -> ... -> progression links"
    )

    def action_weights(self) -> dict[str, float]:
        """Seed map for propagation: action label -> weight."""
        return {action.label: action.weight for action in self.weighted_actions}
