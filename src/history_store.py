import json
import logging
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Union

from src.reporting.models import SOURCE_API, CommentAnalysis


class ThreadSafeHistoryStore:
    """A thread-safe, newest-first history of analyzed comments.

    When a *path* is given the history is mirrored to a JSON file after every
    change and can be reloaded with :py:meth:`load`.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        max_entries: Optional[int] = None,
    ):
        """Create a new :class:`ThreadSafeHistoryStore`.

        Args:
            path: Optional JSON file used for persistence. :pydata:`None`
                keeps the history in memory only.
            max_entries: Optional cap on stored analyses; the oldest entries
                are dropped first. :pydata:`None` (default) means unlimited.
        """
        self._entries: List[CommentAnalysis] = []
        self._lock = threading.Lock()
        self._path = Path(path) if path else None
        # None == unlimited
        self._max_entries = max_entries if (max_entries or 0) > 0 else None
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, analysis: CommentAnalysis) -> None:
        """Store *analysis* as the newest entry."""
        self.add_many([analysis])

    def add_many(self, analyses: Iterable[CommentAnalysis]) -> None:
        """Store a batch ahead of existing entries, keeping the batch order."""
        batch = list(analyses)
        if not batch:
            return
        with self._lock:
            self._entries[:0] = batch
            if self._max_entries is not None:
                del self._entries[self._max_entries :]
            self._save_locked()
        self._logger.info("history_added", extra={"count": len(batch)})

    def remove(self, analysis_id: str) -> Optional[CommentAnalysis]:
        """Removes an analysis by its ID. Returns the removed entry or None if not found."""
        with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.id == analysis_id:
                    removed = self._entries.pop(index)
                    self._save_locked()
                    return removed
        return None

    def clear(self) -> int:
        """Drop every entry and return how many were removed."""
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            self._save_locked()
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, analysis_id: str) -> Optional[CommentAnalysis]:
        """Retrieves an analysis by its ID. Returns None if not found."""
        with self._lock:
            return next((e for e in self._entries if e.id == analysis_id), None)

    def list(self, limit: Optional[int] = None) -> List[CommentAnalysis]:
        """Returns a copy of the history, newest first."""
        with self._lock:
            entries = list(self._entries)
        return entries if limit is None else entries[:limit]

    def by_source_url(self, api_url: str) -> List[CommentAnalysis]:
        """Return the analyses fetched from *api_url*, newest first."""
        with self._lock:
            return [
                e for e in self._entries if e.source == SOURCE_API and e.api_url == api_url
            ]

    def count(self) -> int:
        """Returns the total number of stored analyses."""
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> int:
        """Replace the in-memory history with the contents of the JSON file.

        A missing file yields an empty history. Unreadable files and corrupt
        entries are logged and skipped so the store always stays usable.
        Returns the number of entries loaded.
        """
        if self._path is None or not self._path.exists():
            return 0

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self._logger.warning("Error loading saved analyses from %s: %s", self._path, exc)
            return 0
        if not isinstance(raw, list):
            self._logger.warning("Ignoring history file %s: expected a JSON array", self._path)
            return 0

        loaded: List[CommentAnalysis] = []
        for item in raw:
            try:
                loaded.append(CommentAnalysis.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                self._logger.warning("Skipping corrupt history entry: %s", exc)

        with self._lock:
            self._entries = loaded
            if self._max_entries is not None:
                del self._entries[self._max_entries :]
        self._logger.info("history_loaded", extra={"count": len(loaded)})
        return len(loaded)

    def save(self) -> None:
        """Write the current history to the JSON file (no-op without a path)."""
        with self._lock:
            self._save_locked()

    def _save_locked(self) -> None:
        if self._path is None:
            return
        payload = [entry.to_dict() for entry in self._entries]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
            tmp.replace(self._path)
        except OSError as exc:
            self._logger.error("Failed to persist history to %s: %s", self._path, exc)
