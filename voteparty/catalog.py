import json
import os
from typing import Iterable, List, Optional

from voteparty.errors import CatalogError
from voteparty.models import RoundDefinition

DEFAULT_CATALOG_PATH = os.path.join(os.path.dirname(__file__), 'data', 'rounds.json')


class RoundCatalog:
    """Ordered, read-only list of rounds loaded once at startup."""

    def __init__(self, rounds: Iterable[RoundDefinition]):
        self._rounds: List[RoundDefinition] = list(rounds)

    @classmethod
    def from_entries(cls, entries) -> 'RoundCatalog':
        """Build from ``[{"content": ..., "answer": ...}, ...]``."""
        if not isinstance(entries, list):
            raise CatalogError('round catalog must be a list')
        rounds = []
        for ordinal, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise CatalogError(f'round {ordinal} is not an object')
            media = entry.get('content')
            answer = entry.get('answer')
            if not media or not answer:
                raise CatalogError(f'round {ordinal} needs "content" and "answer"')
            rounds.append(RoundDefinition(ordinal=ordinal, media_reference=str(media), correct_choice=str(answer)))
        return cls(rounds)

    @classmethod
    def from_json(cls, path: Optional[str] = None) -> 'RoundCatalog':
        path = path or DEFAULT_CATALOG_PATH
        try:
            with open(path, encoding='utf-8') as fh:
                entries = json.load(fh)
        except (OSError, ValueError) as exc:
            raise CatalogError(f'cannot load round catalog {path}: {exc}') from exc
        return cls.from_entries(entries)

    def get(self, index: int) -> Optional[RoundDefinition]:
        if 0 <= index < len(self._rounds):
            return self._rounds[index]
        return None

    def media_references(self) -> List[str]:
        return [r.media_reference for r in self._rounds]

    def __len__(self) -> int:
        return len(self._rounds)

    def __iter__(self):
        return iter(self._rounds)
