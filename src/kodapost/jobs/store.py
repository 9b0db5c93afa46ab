"""Durable keyed storage for job rows.

The store is the single source of truth for what happened to a job. Every
update is an atomic read-modify-write on one row. Expiry is applied lazily
at read time: an expired row is reported as not found even though it still
exists until a sweeper purges it.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterator

from .models import Job, utc_now

logger = logging.getLogger("job_store")

Clock = Callable[[], datetime]

# Fields that may be written exactly once
_WRITE_ONCE_FIELDS = ("started_at", "completed_at")
_IMMUTABLE_FIELDS = ("id", "owner_id", "input_config", "created_at", "expires_at")


class JobNotFoundError(LookupError):
    """Job does not exist, has expired, or is not visible to the caller."""

    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class JobStoreError(RuntimeError):
    """A write was rejected by the store."""


class JobStore(ABC):
    """Job row storage contract.

    Subclasses provide the raw row access (``_load``/``_save``/``_delete``/
    ``_ids``); the base class applies expiry, locking and the write rules.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or utc_now
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # =========================================================================
    # Raw row access - subclasses must implement
    # =========================================================================

    @abstractmethod
    def _load(self, job_id: str) -> Job | None:
        """Return the stored row, ignoring expiry."""

    @abstractmethod
    def _save(self, job: Job) -> None:
        """Persist the whole row."""

    @abstractmethod
    def _delete(self, job_id: str) -> None:
        """Remove the row."""

    @abstractmethod
    def _ids(self) -> Iterator[str]:
        """Iterate over stored row ids."""

    # =========================================================================
    # Public contract
    # =========================================================================

    def now(self) -> datetime:
        """Current time according to the store's clock."""
        return self._clock()

    def create(self, job: Job) -> None:
        """Insert a new job row.

        Raises:
            JobStoreError: If a row with the same id already exists.
        """
        with self._lock_for(job.id):
            if self._load(job.id) is not None:
                raise JobStoreError(f"Job already exists: {job.id}")
            self._save(job)
        logger.info(f"JOB:{job.id} | CREATED | owner:{job.owner_id}")

    def get(self, job_id: str) -> Job:
        """Read a job row.

        Raises:
            JobNotFoundError: If the row is missing or expired.
        """
        job = self._load(job_id)
        if job is None or job.is_expired(self.now()):
            raise JobNotFoundError(job_id)
        return job

    def update(self, job_id: str, **fields: Any) -> Job:
        """Atomically apply whole-field updates to one row.

        Raises:
            JobNotFoundError: If the row is missing.
            JobStoreError: If the row is terminal or the update breaks a
                write rule (immutable field, write-once timestamp,
                decreasing progress).
        """
        with self._lock_for(job_id):
            current = self._load(job_id)
            if current is None:
                raise JobNotFoundError(job_id)
            self._check_update(current, fields)

            data = current.model_dump()
            data.update(fields)
            updated = Job.model_validate(data)
            self._save(updated)

        logger.debug(f"JOB:{job_id} | UPDATED | fields:{sorted(fields)}")
        return updated

    def purge_expired(self) -> int:
        """Delete expired rows. Returns the number of rows removed."""
        now = self.now()
        removed = 0
        for job_id in list(self._ids()):
            with self._lock_for(job_id):
                job = self._load(job_id)
                if job is None or not job.is_expired(now):
                    continue
                self._delete(job_id)
                removed += 1
            self._forget_lock(job_id)
        if removed:
            logger.info(f"PURGE | removed:{removed}")
        return removed

    # =========================================================================
    # Helpers
    # =========================================================================

    def _lock_for(self, job_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(job_id)
            if lock is None:
                lock = self._locks[job_id] = threading.Lock()
            return lock

    def _forget_lock(self, job_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(job_id, None)

    def _check_update(self, current: Job, fields: dict[str, Any]) -> None:
        if current.is_terminal:
            raise JobStoreError(
                f"Job {current.id} is {current.status.value} and can no longer change"
            )

        for name in _IMMUTABLE_FIELDS:
            if name in fields:
                raise JobStoreError(f"Field '{name}' cannot be updated")

        for name in _WRITE_ONCE_FIELDS:
            if name in fields and getattr(current, name) is not None:
                raise JobStoreError(f"Field '{name}' is already set on job {current.id}")

        progress = fields.get("progress")
        if progress is not None and progress < current.progress:
            raise JobStoreError(
                f"Progress cannot go backwards ({current.progress} -> {progress})"
            )


class InMemoryJobStore(JobStore):
    """Process-local store. Rows are lost on restart."""

    def __init__(self, clock: Clock | None = None):
        super().__init__(clock)
        self._rows: dict[str, Job] = {}

    def _load(self, job_id: str) -> Job | None:
        return self._rows.get(job_id)

    def _save(self, job: Job) -> None:
        self._rows[job.id] = job

    def _delete(self, job_id: str) -> None:
        self._rows.pop(job_id, None)

    def _ids(self) -> Iterator[str]:
        return iter(self._rows.keys())


class JsonFileJobStore(JobStore):
    """One JSON file per job under a directory. Survives restarts.

    Writes go to a temporary file that is then renamed over the row file,
    so a reader never sees a half-written row.
    """

    def __init__(self, jobs_dir: Path, clock: Clock | None = None):
        super().__init__(clock)
        self.jobs_dir = Path(jobs_dir)
        self.jobs_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, job_id: str) -> Path:
        # Ids are generated url-safe tokens; reject anything path-like
        if not job_id or "/" in job_id or "\\" in job_id or job_id.startswith("."):
            raise JobNotFoundError(job_id)
        return self.jobs_dir / f"{job_id}.json"

    def _load(self, job_id: str) -> Job | None:
        path = self._path(job_id)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return Job.model_validate(json.load(f))

    def _save(self, job: Job) -> None:
        path = self._path(job.id)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(job.model_dump_json(indent=2))
        os.replace(tmp_path, path)

    def _delete(self, job_id: str) -> None:
        self._path(job_id).unlink(missing_ok=True)

    def _ids(self) -> Iterator[str]:
        for path in sorted(self.jobs_dir.glob("*.json")):
            yield path.stem
