"""Candidate CRUD operations."""

from typing import Callable, List, Optional

from constants import Tables
from database.db import Transaction
from database.schema import Candidate, CandidateStage


def _row_to_candidate(row) -> Candidate:
    """Convert DB row to Candidate."""
    return Candidate(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        job_id=row["job_id"],
        stage=CandidateStage(row["stage"]) if row["stage"] else CandidateStage.APPLIED,
    )


def get_candidate(tx: Transaction, candidate_id: int) -> Optional[Candidate]:
    """Get candidate by ID."""
    tx.require(Tables.CANDIDATES)
    row = tx.fetchone("SELECT * FROM candidates WHERE id = ?", (candidate_id,))
    if not row:
        return None
    return _row_to_candidate(row)


def get_candidates_by_email(tx: Transaction, email: str) -> List[Candidate]:
    """Get candidates by email address (a person may apply to several jobs)."""
    tx.require(Tables.CANDIDATES)
    rows = tx.fetchall("SELECT * FROM candidates WHERE email = ? ORDER BY id", (email,))
    return [_row_to_candidate(row) for row in rows]


def list_candidates(
    tx: Transaction,
    job_id: Optional[int] = None,
    stage: Optional[CandidateStage] = None,
    predicate: Optional[Callable[[Candidate], bool]] = None,
) -> List[Candidate]:
    """List candidates by id with optional indexed equality filters and a predicate."""
    tx.require(Tables.CANDIDATES)
    clauses = []
    values = []
    if job_id is not None:
        clauses.append("job_id = ?")
        values.append(job_id)
    if stage is not None:
        clauses.append("stage = ?")
        values.append(CandidateStage(stage).value)
    where = f' WHERE {" AND ".join(clauses)}' if clauses else ""
    rows = tx.fetchall(f"SELECT * FROM candidates{where} ORDER BY id", values)
    candidates = [_row_to_candidate(row) for row in rows]
    if predicate is not None:
        candidates = [c for c in candidates if predicate(c)]
    return candidates


def insert_candidate(
    tx: Transaction,
    name: str,
    email: str,
    job_id: Optional[int],
    stage: CandidateStage = CandidateStage.APPLIED,
) -> Candidate:
    """Insert a candidate row. Does not write a timeline entry."""
    tx.require(Tables.CANDIDATES)
    cursor = tx.execute(
        """
        INSERT INTO candidates (name, email, job_id, stage)
        VALUES (?, ?, ?, ?)
    """,
        (name, email, job_id, CandidateStage(stage).value),
    )
    return get_candidate(tx, cursor.lastrowid)


def set_candidate_stage(tx: Transaction, candidate_id: int, stage: CandidateStage) -> None:
    tx.require(Tables.CANDIDATES)
    tx.execute(
        "UPDATE candidates SET stage = ? WHERE id = ?", (CandidateStage(stage).value, candidate_id)
    )
