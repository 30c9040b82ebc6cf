"""Timeline (candidate audit trail) operations. Append-only."""

from datetime import datetime
from typing import List, Optional

from constants import Tables
from database.db import Transaction
from database.schema import CandidateStage, TimelineEntry


def _row_to_entry(row) -> TimelineEntry:
    return TimelineEntry(
        id=row["id"],
        candidate_id=row["candidate_id"],
        timestamp=datetime.fromisoformat(row["timestamp"]),
        event=row["event"],
        stage=CandidateStage(row["stage"]) if row["stage"] else None,
        notes=row["notes"],
    )


def append_entry(
    tx: Transaction,
    candidate_id: int,
    event: str,
    stage: Optional[CandidateStage] = None,
    notes: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> TimelineEntry:
    """Append a timeline entry for a candidate."""
    tx.require(Tables.TIMELINE)
    timestamp = timestamp or datetime.now()
    stage_value = CandidateStage(stage).value if stage is not None else None
    cursor = tx.execute(
        """
        INSERT INTO timeline (candidate_id, timestamp, event, stage, notes)
        VALUES (?, ?, ?, ?, ?)
    """,
        (candidate_id, timestamp.isoformat(timespec="microseconds"), event, stage_value, notes),
    )
    return TimelineEntry(
        id=cursor.lastrowid,
        candidate_id=candidate_id,
        timestamp=timestamp,
        event=event,
        stage=stage,
        notes=notes,
    )


def get_entries_for_candidate(tx: Transaction, candidate_id: int) -> List[TimelineEntry]:
    """Get all timeline entries for a candidate, newest first."""
    tx.require(Tables.TIMELINE)
    rows = tx.fetchall(
        "SELECT * FROM timeline WHERE candidate_id = ? ORDER BY timestamp DESC, id DESC",
        (candidate_id,),
    )
    return [_row_to_entry(row) for row in rows]


def count_entries_for_candidate(tx: Transaction, candidate_id: int) -> int:
    tx.require(Tables.TIMELINE)
    return tx.fetchone(
        "SELECT COUNT(*) FROM timeline WHERE candidate_id = ?", (candidate_id,)
    )[0]
