from django.contrib import admin

from mch_care.ledger.ledger import CompletionLedger
from mch_care.ledger.models import CompletionRecord, SyncStatus


@admin.register(CompletionRecord)
class CompletionRecordAdmin(admin.ModelAdmin):
    list_display = ["subject_id", "milestone_id", "completed_at", "sync_status", "local_revision", "server_revision"]
    list_filter = ["sync_status", "details_kind"]
    search_fields = ["subject_id", "milestone_id"]
    readonly_fields = ["completion_id", "local_revision", "server_revision", "last_synced_at"]
    actions = ["retry_failed_sync"]

    @admin.action(description="Retry failed sync")
    def retry_failed_sync(self, request, queryset):
        ledger = CompletionLedger()
        retried = sum(
            1
            for record in queryset.filter(sync_status=SyncStatus.failed)
            if ledger.retry(record.subject_id, record.milestone_id)
        )
        self.message_user(request, f"{retried} record(s) queued for retry.")
