import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CompletionRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_by", models.CharField(blank=True, max_length=255)),
                ("modified_by", models.CharField(blank=True, max_length=255)),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_modified", models.DateTimeField(auto_now=True)),
                ("subject_id", models.CharField(db_index=True, max_length=64)),
                ("milestone_id", models.CharField(max_length=64)),
                ("completion_id", models.UUIDField(default=uuid.uuid4, editable=False)),
                ("completed_at", models.DateField(blank=True, null=True)),
                ("details_kind", models.CharField(blank=True, max_length=32)),
                ("details", models.JSONField(blank=True, default=dict)),
                (
                    "sync_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("synced", "Synced"), ("failed", "Failed")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("sync_error", models.TextField(blank=True)),
                ("local_revision", models.PositiveIntegerField(default=0)),
                ("server_revision", models.PositiveIntegerField(blank=True, null=True)),
                ("last_synced_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["subject_id", "milestone_id"],
                "unique_together": {("subject_id", "milestone_id")},
            },
        ),
    ]
