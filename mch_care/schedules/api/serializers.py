from rest_framework import serializers

from mch_care.ledger.details import details_from_dict
from mch_care.ledger.models import CompletionRecord


class MilestoneSerializer(serializers.Serializer):
    milestone_id = serializers.CharField()
    offset = serializers.IntegerField()
    label = serializers.CharField()
    short_label = serializers.CharField(allow_null=True)
    description = serializers.CharField(allow_null=True)
    group = serializers.CharField(allow_null=True)


class GraceWindowSerializer(serializers.Serializer):
    amount = serializers.IntegerField()
    unit = serializers.CharField()


class ScheduleTemplateSerializer(serializers.Serializer):
    domain = serializers.CharField()
    version = serializers.IntegerField()
    offset_unit = serializers.CharField(source="domain.offset_unit")
    grace_window = GraceWindowSerializer()
    milestones = MilestoneSerializer(many=True)


class TimelineItemSerializer(serializers.Serializer):
    milestone_id = serializers.CharField()
    offset = serializers.IntegerField()
    label = serializers.CharField(source="milestone.label")
    short_label = serializers.CharField(source="milestone.display_label")
    group = serializers.CharField(source="milestone.group", allow_null=True)
    status = serializers.CharField()
    target_date = serializers.DateField()
    completed_at = serializers.SerializerMethodField()
    sync_status = serializers.SerializerMethodField()

    def get_completed_at(self, item):
        if item.completion is None or item.completion.completed_at is None:
            return None
        return item.completion.completed_at.isoformat()

    def get_sync_status(self, item):
        if item.completion is None:
            return None
        return item.completion.sync_status


class TimelineViewSerializer(serializers.Serializer):
    domain = serializers.CharField()
    reference_date = serializers.DateField()
    today = serializers.DateField()
    current_offset = serializers.IntegerField()
    total_count = serializers.IntegerField()
    completed_count = serializers.IntegerField()
    due_count = serializers.IntegerField()
    upcoming_count = serializers.IntegerField()
    overdue_count = serializers.IntegerField()
    needs_attention_count = serializers.IntegerField()
    completion_percentage = serializers.IntegerField()
    next_item = TimelineItemSerializer(allow_null=True)
    items = TimelineItemSerializer(many=True)


class CompletionRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompletionRecord
        fields = [
            "subject_id",
            "milestone_id",
            "completion_id",
            "completed_at",
            "details_kind",
            "details",
            "sync_status",
            "sync_error",
            "local_revision",
            "server_revision",
            "last_synced_at",
        ]
        read_only_fields = fields


class CompletionWriteSerializer(serializers.Serializer):
    """Body of a completion PUT. ``details`` must match the schedule domain's details shape."""

    completed_at = serializers.DateField(required=False, allow_null=True)
    details = serializers.DictField(required=False, allow_empty=True)

    def validate_details(self, value):
        domain = self.context["domain"]
        try:
            return details_from_dict(str(domain), value)
        except (ValueError, TypeError) as e:
            raise serializers.ValidationError(str(e))
