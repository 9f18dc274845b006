"""Backup export and import for graph and statistics snapshots.

A backup is a single JSON document::

    {
      "graph": {"nodes": {...}, "edges": {...}, "version": 2},
      "playerStatistics": {"Progression": {"experience": 0.0, "level": 0}},
      "exportedAt": "2024-01-01T00:00:00+00:00"
    }

Only serialization happens here; reading and writing files is up to the
caller.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from levelgraph.errors import BackupFormatError
from levelgraph.graph.models import GraphState
from levelgraph.progression.mutations import NodeStats, PlayerStatistics

if TYPE_CHECKING:
    from collections.abc import Mapping

REQUIRED_KEYS = ("graph", "playerStatistics")

_stats_adapter: TypeAdapter[PlayerStatistics] = TypeAdapter(PlayerStatistics)


class Backup(BaseModel):
    """Restored backup contents."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    graph: GraphState
    player_statistics: dict[str, NodeStats] = Field(alias="playerStatistics")
    exported_at: str | None = Field(default=None, alias="exportedAt")


def export_snapshot(
    graph: GraphState,
    stats: Mapping[str, NodeStats],
    *,
    exported_at: str | None = None,
) -> str:
    """Serialize a graph and statistics snapshot to a JSON backup document."""
    document: dict[str, Any] = {
        "graph": graph.model_dump(mode="json", exclude_none=True),
        "playerStatistics": _stats_adapter.dump_python(dict(stats), mode="json"),
        "exportedAt": exported_at or datetime.now(UTC).isoformat(),
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def parse_backup(content: str) -> Backup:
    """Parse and validate a JSON backup document.

    Args:
        content: JSON text produced by ``export_snapshot``.

    Returns:
        The restored Backup.

    Raises:
        BackupFormatError: If the text is not JSON, lacks mandatory keys, or
            holds records of the wrong shape.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise BackupFormatError(f"not a valid JSON document ({e.msg})") from e

    if not isinstance(data, dict):
        raise BackupFormatError("top level must be an object")

    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise BackupFormatError("missing mandatory structures", missing=missing)

    try:
        return Backup.model_validate(data)
    except ValidationError as e:
        raise BackupFormatError(f"{e.error_count()} invalid field(s): {e.errors()[0]['msg']}") from e
