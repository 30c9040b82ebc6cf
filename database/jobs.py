"""Job CRUD operations."""

import json
import sqlite3
from typing import Callable, List, Optional

from constants import Messages, Tables
from core.exceptions import ValidationConflictError
from database.db import Transaction
from database.schema import Job, JobStatus


def _row_to_job(row) -> Job:
    """Convert DB row to Job."""
    return Job(
        id=row["id"],
        title=row["title"],
        slug=row["slug"],
        status=JobStatus(row["status"]),
        tags=json.loads(row["tags"]) if row["tags"] else [],
        order=row["order"],
    )


def get_job(tx: Transaction, job_id: int) -> Optional[Job]:
    """Get job by ID."""
    tx.require(Tables.JOBS)
    row = tx.fetchone("SELECT * FROM jobs WHERE id = ?", (job_id,))
    if not row:
        return None
    return _row_to_job(row)


def get_job_by_slug(tx: Transaction, slug: str) -> Optional[Job]:
    """Get job by exact (case-sensitive) slug."""
    tx.require(Tables.JOBS)
    row = tx.fetchone("SELECT * FROM jobs WHERE slug = ?", (slug,))
    if not row:
        return None
    return _row_to_job(row)


def list_jobs(
    tx: Transaction,
    status: Optional[JobStatus] = None,
    predicate: Optional[Callable[[Job], bool]] = None,
) -> List[Job]:
    """List jobs by ascending order, optionally filtered by status and a predicate."""
    tx.require(Tables.JOBS)
    if status is not None:
        rows = tx.fetchall(
            'SELECT * FROM jobs WHERE status = ? ORDER BY "order", id', (JobStatus(status).value,)
        )
    else:
        rows = tx.fetchall('SELECT * FROM jobs ORDER BY "order", id')
    jobs = [_row_to_job(row) for row in rows]
    if predicate is not None:
        jobs = [job for job in jobs if predicate(job)]
    return jobs


def count_jobs(tx: Transaction) -> int:
    tx.require(Tables.JOBS)
    return tx.fetchone("SELECT COUNT(*) FROM jobs")[0]


def ensure_slug_available(tx: Transaction, slug: str, exclude_id: Optional[int] = None) -> None:
    """Raise ValidationConflictError when another job already uses the slug."""
    existing = get_job_by_slug(tx, slug)
    if existing is not None and existing.id != exclude_id:
        raise ValidationConflictError(Messages.DUPLICATE_SLUG.format(slug=slug))


def insert_job(
    tx: Transaction,
    title: str,
    slug: str,
    order: int,
    tags: Optional[List[str]] = None,
    status: JobStatus = JobStatus.ACTIVE,
) -> Job:
    """Insert a new job row."""
    tx.require(Tables.JOBS)
    ensure_slug_available(tx, slug)
    try:
        cursor = tx.execute(
            """
            INSERT INTO jobs (title, slug, status, tags, "order")
            VALUES (?, ?, ?, ?, ?)
        """,
            (title, slug, JobStatus(status).value, json.dumps(list(tags or [])), order),
        )
    except sqlite3.IntegrityError as e:
        raise ValidationConflictError(Messages.DUPLICATE_SLUG.format(slug=slug)) from e
    return get_job(tx, cursor.lastrowid)


def update_job(
    tx: Transaction,
    job_id: int,
    title: Optional[str] = None,
    slug: Optional[str] = None,
    status: Optional[JobStatus] = None,
    tags: Optional[List[str]] = None,
) -> Optional[Job]:
    """Update job fields; ``order`` is only changed through set_job_order/shift_orders."""
    tx.require(Tables.JOBS)
    updates = []
    values = []
    if title is not None:
        updates.append("title = ?")
        values.append(title)
    if slug is not None:
        ensure_slug_available(tx, slug, exclude_id=job_id)
        updates.append("slug = ?")
        values.append(slug)
    if status is not None:
        updates.append("status = ?")
        values.append(JobStatus(status).value)
    if tags is not None:
        updates.append("tags = ?")
        values.append(json.dumps(list(tags)))
    if not updates:
        return get_job(tx, job_id)
    values.append(job_id)
    try:
        tx.execute(f'UPDATE jobs SET {", ".join(updates)} WHERE id = ?', values)
    except sqlite3.IntegrityError as e:
        raise ValidationConflictError(Messages.DUPLICATE_SLUG.format(slug=slug)) from e
    return get_job(tx, job_id)


def set_job_order(tx: Transaction, job_id: int, order: int) -> None:
    tx.require(Tables.JOBS)
    tx.execute('UPDATE jobs SET "order" = ? WHERE id = ?', (order, job_id))


def shift_orders(tx: Transaction, low: int, high: int, delta: int, exclude_id: int) -> int:
    """Add ``delta`` to every job with order in [low, high] except ``exclude_id``."""
    tx.require(Tables.JOBS)
    cursor = tx.execute(
        'UPDATE jobs SET "order" = "order" + ? WHERE "order" BETWEEN ? AND ? AND id != ?',
        (delta, low, high, exclude_id),
    )
    return cursor.rowcount
