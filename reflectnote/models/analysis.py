"""Analysis cache entry definitions.

An entry is a JSON object holding the fields of the computed result plus a
``timestamp`` (ISO-8601, UTC) stamped when it was stored. The result fields
are opaque to this package and are returned exactly as they were written.
"""

from typing import Any

from reflectnote.models.base import RecordModel


class AnalysisEntry(RecordModel):
    timestamp: str

    @property
    def payload(self) -> dict[str, Any]:
        return dict(self.model_extra or {})
