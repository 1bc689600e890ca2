"""
Reconciliation Boundary: the contract between the Completion Ledger and the
backend of record, plus its HTTP implementation.
"""

import abc
import logging
import uuid

import httpx
import sentry_sdk
from django.conf import settings
from httpx import Response

from mch_care.ledger.ledger import PendingCompletion, ServerRecord
from mch_care.reconciliation.models import Failed, PushOutcome, ReconciliationError
from mch_care.utils.datetime import parse_iso_date

logger = logging.getLogger(__name__)

GET = "GET"
POST = "POST"

MALFORMED_RESPONSE = "malformed response"
# What a well-formed HTTP response with an unexpected body shape raises while being read.
MALFORMED_RESPONSE_ERRORS = (KeyError, TypeError, AttributeError, ValueError)


class ReconciliationBoundary(abc.ABC):
    @abc.abstractmethod
    def push_pending(self, subject_id: str, pending: list[PendingCompletion]) -> list[PushOutcome]:
        """Send pending records to the backend. One outcome per record sent."""

    @abc.abstractmethod
    def pull_server_state(self, subject_id: str) -> list[ServerRecord]:
        """Fetch the server-authoritative records for a subject.

        Raises:
            ReconciliationError: If the server state could not be fetched
        """


class HttpReconciliationBoundary(ReconciliationBoundary):
    """REST client for the backend of record.

    Push: ``POST /subjects/<id>/completions/sync/`` with ``{"completions": [...]}``,
    answered with ``{"results": [{"milestone_id", "status", "server_revision" | "reason"}]}``.

    Pull: ``GET /subjects/<id>/completions/`` answered with ``{"completions": [...]}``.
    """

    def __init__(self, base_url: str | None = None, token: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or settings.MCH_BACKEND_URL).rstrip("/")
        self.token = token if token is not None else settings.MCH_BACKEND_TOKEN
        self.timeout = timeout or settings.MCH_BACKEND_TIMEOUT

    def push_pending(self, subject_id: str, pending: list[PendingCompletion]) -> list[PushOutcome]:
        if not pending:
            return []

        json = {"completions": [record.to_payload() for record in pending]}
        try:
            response = self._make_request(POST, f"/subjects/{subject_id}/completions/sync/", json=json)
        except httpx.HTTPError as e:
            sentry_sdk.capture_exception(e)
            logger.warning("Push for subject %s failed: %s", subject_id, e)
            return [PushOutcome(record.milestone_id, Failed(_describe_error(e))) for record in pending]

        try:
            results = list(response.json().get("results", []))
        except MALFORMED_RESPONSE_ERRORS as e:
            sentry_sdk.capture_exception(e)
            logger.warning("Push for subject %s got a malformed response: %s", subject_id, e)
            return [PushOutcome(record.milestone_id, Failed(MALFORMED_RESPONSE)) for record in pending]

        outcomes = {}
        for result in results:
            try:
                milestone_id = result.get("milestone_id")
                if milestone_id:
                    outcomes[milestone_id] = PushOutcome.build(
                        milestone_id,
                        result.get("status", ""),
                        server_revision=result.get("server_revision"),
                        reason=result.get("reason", ""),
                    )
            except MALFORMED_RESPONSE_ERRORS as e:
                logger.warning("Malformed push result for subject %s: %r (%s)", subject_id, result, e)
                if isinstance(result, dict) and isinstance(result.get("milestone_id"), str):
                    outcomes[result["milestone_id"]] = PushOutcome(result["milestone_id"], Failed(MALFORMED_RESPONSE))
        return [
            outcomes.get(record.milestone_id) or PushOutcome(record.milestone_id, Failed("no result returned"))
            for record in pending
        ]

    def pull_server_state(self, subject_id: str) -> list[ServerRecord]:
        try:
            response = self._make_request(GET, f"/subjects/{subject_id}/completions/")
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            sentry_sdk.capture_exception(e)
            raise ReconciliationError(f"Could not fetch server state for {subject_id}: {_describe_error(e)}") from e

        try:
            return [_server_record(item) for item in data.get("completions", [])]
        except MALFORMED_RESPONSE_ERRORS as e:
            sentry_sdk.capture_exception(e)
            raise ReconciliationError(f"Could not fetch server state for {subject_id}: {MALFORMED_RESPONSE}") from e

    def _make_request(self, method, path, params=None, json=None) -> Response:
        if json and not method == POST:
            raise ValueError("json can only be used with POST requests")

        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        response = httpx.request(
            method, f"{self.base_url}{path}", params=params, json=json, headers=headers, timeout=self.timeout
        )
        response.raise_for_status()
        return response


def _server_record(item: dict) -> ServerRecord:
    milestone_id = item["milestone_id"]
    if not isinstance(milestone_id, str) or not milestone_id:
        raise ValueError(f"invalid milestone_id {milestone_id!r}")
    completion_id = item.get("completion_id")
    return ServerRecord(
        milestone_id=milestone_id,
        server_revision=int(item["server_revision"]),
        completed_at=parse_iso_date(item.get("completed_at")),
        details_kind=item.get("details_kind") or "",
        details=dict(item.get("details") or {}),
        completion_id=str(uuid.UUID(str(completion_id))) if completion_id else None,
    )


def _describe_error(error: Exception) -> str:
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    return str(error) or error.__class__.__name__


def get_boundary() -> ReconciliationBoundary:
    return HttpReconciliationBoundary()
