# emltrust/services/history.py
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from ..config import settings
from ..models import Grade, HistoryEntry
from .storage import get_backend

logger = logging.getLogger("emltrust.history")


class HistoryStore:
    """
    Most-recent-first list of verification results, one per content hash,
    kept as a JSON list under a single key.

    History is a convenience: storage errors are logged and swallowed so a
    failed write never blocks the verification result. Read-then-write is
    not atomic, so only one writer should use a key at a time.
    """

    def __init__(self, backend=None, key: Optional[str] = None, max_entries: Optional[int] = None):
        self._backend = backend if backend is not None else get_backend()
        self._key = key or settings.HISTORY_STORAGE_KEY
        self._max = max_entries if max_entries is not None else settings.HISTORY_MAX_ENTRIES

    @property
    def max_entries(self) -> int:
        return self._max

    async def list(self) -> List[HistoryEntry]:
        try:
            raw = await self._backend.get(self._key)
        except Exception as e:
            logger.warning("History read failed: %s", e)
            return []
        if not raw:
            return []
        try:
            return [HistoryEntry.model_validate(item) for item in json.loads(raw)]
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning("Discarding unreadable history under %s: %s", self._key, e)
            return []

    async def _save(self, entries: List[HistoryEntry]) -> bool:
        try:
            payload = json.dumps([e.model_dump(mode="json") for e in entries])
            await self._backend.set(self._key, payload)
            return True
        except Exception:
            logger.exception("History write failed; change kept in memory only")
            return False

    async def add(
        self,
        hash: str,
        score: int,
        grade,
        from_domain: Optional[str] = None,
        subject: Optional[str] = None,
        date: Optional[str] = None,
    ) -> HistoryEntry:
        entry = HistoryEntry(
            id=str(uuid.uuid4()),
            hash=hash,
            from_domain=from_domain,
            subject=subject,
            date=date,
            score=score,
            grade=Grade(grade),
            verified_at=datetime.now(timezone.utc).isoformat(),
        )

        # re-verifying the same content supersedes the older entry
        entries = [e for e in await self.list() if e.hash != hash]
        entries.insert(0, entry)
        dropped = len(entries) - self._max
        if dropped > 0:
            logger.debug("History over capacity, evicting %d oldest entries", dropped)
        await self._save(entries[: self._max])
        return entry

    async def remove(self, entry_id: str) -> List[HistoryEntry]:
        entries = await self.list()
        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) != len(entries):
            await self._save(remaining)
        return remaining

    async def clear(self) -> None:
        try:
            await self._backend.delete(self._key)
        except Exception:
            logger.exception("History clear failed")

    async def find(self, hash: str) -> Optional[HistoryEntry]:
        for entry in await self.list():
            if entry.hash == hash:
                return entry
        return None

    async def exists(self, hash: str) -> bool:
        return await self.find(hash) is not None
