import uuid

from django.db import models
from django.utils.translation import gettext

from mch_care.ledger.details import CompletionDetails, details_from_dict
from mch_care.utils.db import BaseModel


class SyncStatus(models.TextChoices):
    pending = "pending", gettext("Pending")
    synced = "synced", gettext("Synced")
    failed = "failed", gettext("Failed")


class CompletionRecord(BaseModel):
    """Local record that a milestone was completed for a subject (child or pregnancy).

    Keyed by (subject_id, milestone_id). Subject and milestone ids are not
    validated against the registry or the schedule templates.
    """

    subject_id = models.CharField(max_length=64, db_index=True)
    milestone_id = models.CharField(max_length=64)
    completion_id = models.UUIDField(default=uuid.uuid4, editable=False)
    completed_at = models.DateField(null=True, blank=True)
    details_kind = models.CharField(max_length=32, blank=True)
    details = models.JSONField(default=dict, blank=True)

    sync_status = models.CharField(max_length=16, choices=SyncStatus.choices, default=SyncStatus.pending)
    sync_error = models.TextField(blank=True)
    local_revision = models.PositiveIntegerField(default=0)
    server_revision = models.PositiveIntegerField(null=True, blank=True)
    last_synced_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ("subject_id", "milestone_id")
        ordering = ["subject_id", "milestone_id"]

    def __str__(self):
        return f"{self.subject_id}:{self.milestone_id} ({self.sync_status} r{self.local_revision})"

    @property
    def typed_details(self) -> CompletionDetails | None:
        return details_from_dict(self.details_kind, self.details)

    @property
    def is_unsynced(self) -> bool:
        return self.sync_status != SyncStatus.synced
