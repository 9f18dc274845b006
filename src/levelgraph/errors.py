"""Error types raised at the package's edges.

The graph and progression engines are total and never raise for bad input.
Only backup documents crossing the boundary can be rejected here.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BackupFormatError(Exception):
    """Raised when a backup document cannot be restored.

    Attributes:
        reason: Short description of what is wrong.
        missing: Mandatory top-level keys absent from the document.
    """

    reason: str
    missing: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Invalid backup: {self.reason}"
        if self.missing:
            msg += f" (missing: {', '.join(self.missing)})"
        return msg
