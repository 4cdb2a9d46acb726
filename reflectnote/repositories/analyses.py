from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter

from reflectnote.core import config
from reflectnote.models.analysis import AnalysisEntry
from reflectnote.repositories.base import CollectionRepository

_analyses_adapter = TypeAdapter(dict[str, AnalysisEntry])


class AnalysisCache(CollectionRepository):
    """Memoized analysis results keyed by an opaque string."""

    def get_analyses(self) -> dict[str, AnalysisEntry]:
        return self._load(config.ANALYSES_KEY, _analyses_adapter, {})

    def get_analysis(self, key: str) -> AnalysisEntry | None:
        return self.get_analyses().get(key)

    def set_analysis(self, key: str, result: Mapping[str, Any]) -> AnalysisEntry:
        entry = AnalysisEntry.model_validate({**result, 'timestamp': self.clock().isoformat()})
        with self.store.lock:
            analyses = self.get_analyses()
            analyses[key] = entry
            self.store.set(config.ANALYSES_KEY, self._dump(_analyses_adapter, analyses))
        return entry
