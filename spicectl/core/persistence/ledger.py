"""
Operation ledger — persisted history of lifecycle attempts.

Every operation writes its record twice to an NDJSON (newline-delimited
JSON) file: once Pending when it begins, once more when it completes.
Readers fold lines by record id, last line wins, so the file itself
stays append-only and a crash between the two writes leaves a visible
Pending entry rather than nothing.

The core never deletes records; retention is the caller's concern.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from spicectl.core.errors import LedgerError
from spicectl.core.models.operation import OperationKind, OperationRecord

logger = logging.getLogger(__name__)

DEFAULT_LEDGER_FILE = "operations.ndjson"


class OperationLedger:
    """Append-on-begin, update-on-complete log of operations.

    ``begin`` returns the record itself as the handle; ``complete``
    must be called exactly once per handle.
    """

    def __init__(self, path: Path | None = None, state_dir: Path | None = None):
        if path is not None:
            self._path = path
        elif state_dir is not None:
            self._path = state_dir / DEFAULT_LEDGER_FILE
        else:
            self._path = Path(DEFAULT_LEDGER_FILE)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ── Write path ──────────────────────────────────────────────

    def begin(self, kind: OperationKind) -> OperationRecord:
        """Create and persist a Pending record stamped with the current time."""
        record = OperationRecord(kind=kind)
        self._append(record)
        logger.debug("Ledger begin: %s/%s", kind.value, record.id)
        return record

    def complete(
        self,
        handle: OperationRecord,
        success: bool,
        output: str,
        error: str | None = None,
    ) -> OperationRecord:
        """Transition a Pending record to Success or Failed and persist it.

        Raises:
            LedgerError: If the record was already completed.
        """
        if not handle.pending:
            raise LedgerError(
                f"Operation {handle.id} already completed with status {handle.status.value}"
            )
        handle.complete(success=success, output=output, error=error)
        self._append(handle)
        logger.debug(
            "Ledger complete: %s/%s → %s (%.2fs)",
            handle.kind.value, handle.id, handle.status.value, handle.duration_s or 0.0,
        )
        return handle

    def _append(self, record: OperationRecord) -> None:
        line = json.dumps(record.model_dump(mode="json"), ensure_ascii=False) + "\n"
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)

    # ── Read path ───────────────────────────────────────────────

    def read_all(self) -> list[OperationRecord]:
        """Every record in its latest state, in the order first begun."""
        if not self._path.is_file():
            return []

        latest: dict[str, OperationRecord] = {}
        try:
            with self._path.open("r", encoding="utf-8", errors="replace") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        record = OperationRecord.model_validate_json(line)
                    except ValidationError as e:
                        logger.warning("Skipping corrupt ledger entry at line %d: %s", line_num, e)
                        continue
                    latest[record.id] = record
        except OSError as e:
            logger.error("Failed to read operation ledger: %s", e)

        return list(latest.values())

    def recent(self, n: int = 10) -> list[OperationRecord]:
        """The ``n`` most recent records, newest start time first."""
        records = sorted(self.read_all(), key=lambda r: r.started_at, reverse=True)
        return records[:n]

    def get(self, record_id: str) -> OperationRecord | None:
        for record in self.read_all():
            if record.id == record_id:
                return record
        return None
