"""
Completion Ledger: the local store of milestone completions.

Writes are optimistic: ``upsert_completion`` marks the record ``pending`` and
bumps its ``local_revision`` immediately, independent of the backend. The
reconciliation layer later confirms (``mark_synced``) or flags
(``mark_failed``) the write. A confirmation is only applied when the record
has not been changed locally since the push started (last local write wins).

Every mutation is a short transaction holding a row lock on the key, so a
reader never observes a half-written record.
"""

import dataclasses
import datetime
import logging
import uuid

from django.db import transaction
from django.utils import timezone

from mch_care.ledger.details import CompletionDetails, details_to_dict
from mch_care.ledger.models import CompletionRecord, SyncStatus

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class PendingCompletion:
    """A pending record as captured when a push starts."""

    subject_id: str
    milestone_id: str
    completion_id: str
    local_revision: int
    completed_at: datetime.date | None
    details_kind: str
    details: dict

    def to_payload(self) -> dict:
        return {
            "completion_id": self.completion_id,
            "milestone_id": self.milestone_id,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "details_kind": self.details_kind,
            "details": self.details,
            "local_revision": self.local_revision,
        }


@dataclasses.dataclass(frozen=True)
class ServerRecord:
    """A completion as reported by the backend of record."""

    milestone_id: str
    server_revision: int
    completed_at: datetime.date | None = None
    details_kind: str = ""
    details: dict = dataclasses.field(default_factory=dict)
    completion_id: str | None = None


@dataclasses.dataclass
class MergeResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    removed: int = 0


class CompletionLedger:
    def __init__(self, queryset=None):
        self.queryset = queryset if queryset is not None else CompletionRecord.objects.all()

    def _for_subject(self, subject_id: str):
        return self.queryset.filter(subject_id=str(subject_id))

    def _locked(self, subject_id: str, milestone_id: str) -> CompletionRecord | None:
        return self._for_subject(subject_id).select_for_update().filter(milestone_id=milestone_id).first()

    def get(self, subject_id: str) -> list[CompletionRecord]:
        return list(self._for_subject(subject_id).order_by("milestone_id"))

    def get_record(self, subject_id: str, milestone_id: str) -> CompletionRecord | None:
        return self._for_subject(subject_id).filter(milestone_id=milestone_id).first()

    def upsert_completion(
        self,
        subject_id: str,
        milestone_id: str,
        completed_at: datetime.date | None,
        details: CompletionDetails | None = None,
        actor: str = "",
    ) -> CompletionRecord:
        """Create or overwrite the record for (subject_id, milestone_id) and mark it pending."""
        with transaction.atomic():
            record = self._locked(subject_id, milestone_id)
            if record is None:
                record = CompletionRecord(subject_id=str(subject_id), milestone_id=milestone_id, created_by=actor)
            record.completed_at = completed_at
            record.details_kind = details.kind if details is not None else ""
            record.details = details_to_dict(details)
            record.sync_status = SyncStatus.pending
            record.sync_error = ""
            record.local_revision += 1
            record.modified_by = actor
            record.save()

        logger.info("Recorded %s for subject %s (revision %s)", milestone_id, subject_id, record.local_revision)
        return record

    def mark_synced(
        self,
        subject_id: str,
        milestone_id: str,
        server_revision: int,
        local_revision: int,
        completion_id: str | None = None,
    ) -> bool:
        """
        Apply a server acknowledgement.

        Args:
            local_revision: The record's revision captured when the push started
            completion_id: The record's completion_id captured when the push started

        Returns:
            True if the record moved to synced. False if the result was
            stale (newer local write, record removed or recreated) and was
            discarded.
        """
        with transaction.atomic():
            record = self._locked(subject_id, milestone_id)
            if not self._matches_capture(record, local_revision, completion_id):
                logger.info("Discarding stale sync ack for %s/%s", subject_id, milestone_id)
                return False
            if record.sync_status != SyncStatus.pending:
                return False
            record.sync_status = SyncStatus.synced
            record.server_revision = server_revision
            record.sync_error = ""
            record.last_synced_at = timezone.now()
            record.save()
        return True

    def mark_failed(
        self,
        subject_id: str,
        milestone_id: str,
        reason: str = "",
        local_revision: int | None = None,
        completion_id: str | None = None,
    ) -> bool:
        """Move a pending record to failed. Stale failures are discarded when a captured revision is given."""
        with transaction.atomic():
            record = self._locked(subject_id, milestone_id)
            if record is None or record.sync_status != SyncStatus.pending:
                return False
            if local_revision is not None and not self._matches_capture(record, local_revision, completion_id):
                logger.info("Discarding stale sync failure for %s/%s", subject_id, milestone_id)
                return False
            record.sync_status = SyncStatus.failed
            record.sync_error = reason
            record.save()

        logger.warning("Sync failed for %s/%s: %s", subject_id, milestone_id, reason)
        return True

    def retry(self, subject_id: str, milestone_id: str) -> bool:
        """Explicitly return a failed record to pending."""
        with transaction.atomic():
            record = self._locked(subject_id, milestone_id)
            if record is None or record.sync_status != SyncStatus.failed:
                return False
            record.sync_status = SyncStatus.pending
            record.save()
        return True

    def retry_failed(self, subject_id: str) -> int:
        failed = self._for_subject(subject_id).filter(sync_status=SyncStatus.failed)
        milestone_ids = list(failed.values_list("milestone_id", flat=True))
        return sum(1 for milestone_id in milestone_ids if self.retry(subject_id, milestone_id))

    def remove(self, subject_id: str, milestone_id: str) -> bool:
        """Delete a record, whatever its sync status. Used to revert a mistaken completion."""
        deleted, _ = self._for_subject(subject_id).filter(milestone_id=milestone_id).delete()
        if deleted:
            logger.info("Removed %s for subject %s", milestone_id, subject_id)
        return bool(deleted)

    def unsynced(self, subject_id: str) -> list[CompletionRecord]:
        return list(
            self._for_subject(subject_id)
            .filter(sync_status__in=[SyncStatus.pending, SyncStatus.failed])
            .order_by("milestone_id")
        )

    def pending_snapshot(self, subject_id: str) -> list[PendingCompletion]:
        return [
            PendingCompletion(
                subject_id=record.subject_id,
                milestone_id=record.milestone_id,
                completion_id=str(record.completion_id),
                local_revision=record.local_revision,
                completed_at=record.completed_at,
                details_kind=record.details_kind,
                details=dict(record.details),
            )
            for record in self._for_subject(subject_id).filter(sync_status=SyncStatus.pending).order_by("milestone_id")
        ]

    def apply_server_state(self, subject_id: str, server_records: list[ServerRecord]) -> MergeResult:
        """
        Merge the server's records for a subject into the ledger.

        The server wins only for keys without a local pending or failed
        record. Synced local records the server no longer reports are removed.
        """
        result = MergeResult()
        server_by_milestone = {record.milestone_id: record for record in server_records}
        now = timezone.now()

        with transaction.atomic():
            local = {record.milestone_id: record for record in self._for_subject(subject_id).select_for_update()}

            for milestone_id, server in server_by_milestone.items():
                existing = local.get(milestone_id)
                if existing is not None and existing.is_unsynced:
                    result.skipped += 1
                    continue

                if existing is None:
                    existing = CompletionRecord(subject_id=str(subject_id), milestone_id=milestone_id)
                    result.created += 1
                else:
                    result.updated += 1
                if server.completion_id:
                    existing.completion_id = uuid.UUID(str(server.completion_id))
                existing.completed_at = server.completed_at
                existing.details_kind = server.details_kind
                existing.details = server.details
                existing.server_revision = server.server_revision
                existing.sync_status = SyncStatus.synced
                existing.sync_error = ""
                existing.last_synced_at = now
                existing.save()

            stale = [
                record.pk
                for milestone_id, record in local.items()
                if milestone_id not in server_by_milestone and record.sync_status == SyncStatus.synced
            ]
            if stale:
                result.removed, _ = CompletionRecord.objects.filter(pk__in=stale).delete()

        logger.info("Merged server state for subject %s: %s", subject_id, result)
        return result

    def sync_summary(self, subject_id: str) -> dict[str, int]:
        summary = {status.value: 0 for status in SyncStatus}
        for status in self._for_subject(subject_id).values_list("sync_status", flat=True):
            summary[status] += 1
        return summary

    @staticmethod
    def _matches_capture(record: CompletionRecord | None, local_revision: int, completion_id: str | None) -> bool:
        if record is None or record.local_revision != local_revision:
            return False
        return completion_id is None or str(record.completion_id) == str(completion_id)
