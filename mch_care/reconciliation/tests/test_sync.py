import datetime

import pytest

from mch_care.ledger.ledger import CompletionLedger, ServerRecord
from mch_care.ledger.models import SyncStatus
from mch_care.reconciliation.boundary import HttpReconciliationBoundary, ReconciliationBoundary
from mch_care.reconciliation.models import Failed, PushOutcome, ReconciliationError, Synced
from mch_care.reconciliation.sync import pull_subject, push_subject

SUBJECT = "3f1c2a9e-5b7d-4c1e-9a0b-2d6e8f4a1c3b"
COMPLETED = datetime.date(2024, 3, 15)


class FakeBoundary(ReconciliationBoundary):
    def __init__(self, results=None, server_records=None, during_push=None):
        self.results = results or {}
        self.server_records = server_records
        self.during_push = during_push
        self.pushed = []

    def push_pending(self, subject_id, pending):
        self.pushed.extend(pending)
        if self.during_push:
            self.during_push()
        return [PushOutcome(record.milestone_id, self.results[record.milestone_id]) for record in pending]

    def pull_server_state(self, subject_id):
        if self.server_records is None:
            raise ReconciliationError("backend unavailable")
        return self.server_records


@pytest.fixture
def ledger(db):
    return CompletionLedger()


def test_push_applies_outcomes(ledger):
    ledger.upsert_completion(SUBJECT, "bcg", COMPLETED)
    ledger.upsert_completion(SUBJECT, "opv0", COMPLETED)
    boundary = FakeBoundary({"bcg": Synced(3), "opv0": Failed("rejected")})

    report = push_subject(SUBJECT, boundary=boundary, ledger=ledger)

    assert report.asdict() == {"subject_id": SUBJECT, "pushed": 2, "synced": 1, "failed": 1, "discarded": 0}
    assert ledger.get_record(SUBJECT, "bcg").sync_status == SyncStatus.synced
    assert ledger.get_record(SUBJECT, "bcg").server_revision == 3
    failed = ledger.get_record(SUBJECT, "opv0")
    assert failed.sync_status == SyncStatus.failed
    assert failed.sync_error == "rejected"


def test_push_only_sends_pending_records(ledger):
    ledger.upsert_completion(SUBJECT, "bcg", COMPLETED)
    ledger.upsert_completion(SUBJECT, "opv0", COMPLETED)
    ledger.mark_failed(SUBJECT, "opv0", reason="timeout")
    boundary = FakeBoundary({"bcg": Synced(1)})

    push_subject(SUBJECT, boundary=boundary, ledger=ledger)

    assert [record.milestone_id for record in boundary.pushed] == ["bcg"]
    assert ledger.get_record(SUBJECT, "opv0").sync_status == SyncStatus.failed


def test_push_with_nothing_pending(ledger):
    boundary = FakeBoundary()

    report = push_subject(SUBJECT, boundary=boundary, ledger=ledger)

    assert report.pushed == 0
    assert boundary.pushed == []


def test_local_write_during_push_wins(ledger):
    ledger.upsert_completion(SUBJECT, "bcg", COMPLETED)
    new_date = COMPLETED + datetime.timedelta(days=1)
    boundary = FakeBoundary(
        {"bcg": Synced(9)},
        during_push=lambda: ledger.upsert_completion(SUBJECT, "bcg", new_date),
    )

    report = push_subject(SUBJECT, boundary=boundary, ledger=ledger)

    assert report.discarded == 1
    assert report.synced == 0
    record = ledger.get_record(SUBJECT, "bcg")
    assert record.sync_status == SyncStatus.pending
    assert record.completed_at == new_date
    assert record.local_revision == 2
    assert record.server_revision is None


def test_failure_for_record_removed_during_push_is_discarded(ledger):
    ledger.upsert_completion(SUBJECT, "bcg", COMPLETED)
    boundary = FakeBoundary({"bcg": Failed("timeout")}, during_push=lambda: ledger.remove(SUBJECT, "bcg"))

    report = push_subject(SUBJECT, boundary=boundary, ledger=ledger)

    assert report.discarded == 1
    assert ledger.get(SUBJECT) == []


def test_pull_merges_server_state(ledger):
    boundary = FakeBoundary(server_records=[ServerRecord("bcg", server_revision=1, completed_at=COMPLETED)])

    result = pull_subject(SUBJECT, boundary=boundary, ledger=ledger)

    assert result.created == 1
    assert ledger.get_record(SUBJECT, "bcg").sync_status == SyncStatus.synced


def test_failed_pull_leaves_ledger_untouched(ledger):
    ledger.upsert_completion(SUBJECT, "bcg", COMPLETED)

    assert pull_subject(SUBJECT, boundary=FakeBoundary(), ledger=ledger) is None
    assert ledger.get_record(SUBJECT, "bcg").sync_status == SyncStatus.pending


def test_malformed_pull_response_leaves_ledger_untouched(ledger, httpx_mock, settings):
    ledger.upsert_completion(SUBJECT, "bcg", COMPLETED)
    httpx_mock.add_response(
        method="GET",
        url=f"{settings.MCH_BACKEND_URL}/subjects/{SUBJECT}/completions/",
        json={"completions": [{"milestone_id": "bcg", "server_revision": 2, "completion_id": "bogus"}]},
    )

    assert pull_subject(SUBJECT, boundary=HttpReconciliationBoundary(), ledger=ledger) is None
    assert ledger.get_record(SUBJECT, "bcg").sync_status == SyncStatus.pending
