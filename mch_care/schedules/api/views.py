from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from mch_care.ledger.ledger import CompletionLedger
from mch_care.reconciliation.tasks import pull_server_completions, push_pending_completions
from mch_care.schedules.api.serializers import (
    CompletionRecordSerializer,
    CompletionWriteSerializer,
    ScheduleTemplateSerializer,
    TimelineViewSerializer,
)
from mch_care.schedules.evaluator import evaluate
from mch_care.schedules.templates import list_templates, load_template
from mch_care.subjects.registry import get_subject, owned_subject_key, reference_date_of, subject_key
from mch_care.utils.datetime import parse_iso_date, today


class ScheduleListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(list_templates())


class ScheduleDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, domain):
        return Response(ScheduleTemplateSerializer(load_template(domain)).data)


class SubjectTimelineView(APIView):
    """Timeline for one subject in one schedule domain. ``?today=YYYY-MM-DD`` overrides the evaluation date."""

    permission_classes = [IsAuthenticated]

    def get(self, request, subject_id, domain):
        template = load_template(domain)
        subject = get_subject(template.domain, subject_id, owner=request.user)

        on_date = today()
        if "today" in request.query_params:
            on_date = parse_iso_date(request.query_params["today"])
            if on_date is None:
                raise ValidationError({"today": "Expected a date in YYYY-MM-DD format."})

        records = CompletionLedger().get(subject_key(subject))
        timeline = evaluate(template, reference_date_of(subject), on_date, records)
        return Response(TimelineViewSerializer(timeline).data)


class SubjectLedgerMixin:
    permission_classes = [IsAuthenticated]

    def get_subject_key(self, subject_id) -> str:
        key = owned_subject_key(self.request.user, subject_id)
        if key is None:
            raise Http404
        return key


class SubjectCompletionsView(SubjectLedgerMixin, APIView):
    def get(self, request, subject_id):
        key = self.get_subject_key(subject_id)
        ledger = CompletionLedger()
        return Response(
            {
                "subject_id": key,
                "summary": ledger.sync_summary(key),
                "completions": CompletionRecordSerializer(ledger.get(key), many=True).data,
            }
        )


class CompletionView(APIView):
    permission_classes = [IsAuthenticated]

    def _resolve(self, subject_id, domain, milestone_id):
        """Returns the template and the subject's ledger key."""
        template = load_template(domain)
        subject = get_subject(template.domain, subject_id, owner=self.request.user)
        if template.get_milestone(milestone_id) is None:
            raise Http404
        return template, subject_key(subject)

    def put(self, request, subject_id, domain, milestone_id):
        template, key = self._resolve(subject_id, domain, milestone_id)
        serializer = CompletionWriteSerializer(data=request.data, context={"domain": template.domain})
        serializer.is_valid(raise_exception=True)

        completed_at = serializer.validated_data.get("completed_at", today())
        record = CompletionLedger().upsert_completion(
            key,
            milestone_id,
            completed_at,
            details=serializer.validated_data.get("details"),
            actor=request.user.username,
        )
        return Response(CompletionRecordSerializer(record).data)

    def delete(self, request, subject_id, domain, milestone_id):
        _, key = self._resolve(subject_id, domain, milestone_id)
        if not CompletionLedger().remove(key, milestone_id):
            raise Http404
        return Response(status=status.HTTP_204_NO_CONTENT)


class RetryCompletionView(CompletionView):
    http_method_names = ["post", "options"]

    def post(self, request, subject_id, domain, milestone_id):
        _, key = self._resolve(subject_id, domain, milestone_id)
        ledger = CompletionLedger()
        if not ledger.retry(key, milestone_id):
            return Response({"detail": "Only failed completions can be retried."}, status=status.HTTP_409_CONFLICT)
        return Response(CompletionRecordSerializer(ledger.get_record(key, milestone_id)).data)


class SubjectSyncView(SubjectLedgerMixin, APIView):
    """Queue a push of pending completions. With ``{"pull": true}`` the server state is merged afterwards."""

    def post(self, request, subject_id):
        key = self.get_subject_key(subject_id)
        push_pending_completions.delay(key)
        pull = bool(request.data.get("pull", False))
        if pull:
            pull_server_completions.delay(key)
        return Response({"subject_id": key, "queued": True, "pull": pull}, status=status.HTTP_202_ACCEPTED)
