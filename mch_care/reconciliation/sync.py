"""
Push / pull orchestration between the Completion Ledger and the Reconciliation Boundary.

A push snapshots the subject's pending records (capturing each record's
``local_revision`` and ``completion_id``), sends them, and applies each
outcome against the captured values. Outcomes for records that were changed,
removed or recreated while the push was in flight are discarded.
"""

import logging

from mch_care.ledger.ledger import CompletionLedger, MergeResult
from mch_care.reconciliation.boundary import ReconciliationBoundary, get_boundary
from mch_care.reconciliation.models import PushReport, ReconciliationError, Synced

logger = logging.getLogger(__name__)


def push_subject(
    subject_id: str, boundary: ReconciliationBoundary | None = None, ledger: CompletionLedger | None = None
) -> PushReport:
    boundary = boundary or get_boundary()
    ledger = ledger or CompletionLedger()
    report = PushReport(subject_id=str(subject_id))

    pending = ledger.pending_snapshot(subject_id)
    if not pending:
        return report

    captured = {record.milestone_id: record for record in pending}
    outcomes = boundary.push_pending(subject_id, pending)
    report.pushed = len(pending)

    for outcome in outcomes:
        sent = captured.get(outcome.milestone_id)
        if sent is None:
            logger.warning("Ignoring result for %s/%s which was not pushed", subject_id, outcome.milestone_id)
            continue

        if isinstance(outcome.result, Synced):
            applied = ledger.mark_synced(
                subject_id,
                sent.milestone_id,
                server_revision=outcome.result.server_revision,
                local_revision=sent.local_revision,
                completion_id=sent.completion_id,
            )
            if applied:
                report.synced += 1
        else:
            applied = ledger.mark_failed(
                subject_id,
                sent.milestone_id,
                reason=outcome.result.reason,
                local_revision=sent.local_revision,
                completion_id=sent.completion_id,
            )
            if applied:
                report.failed += 1
        if not applied:
            report.discarded += 1

    logger.info("Pushed completions for subject %s: %s", subject_id, report)
    return report


def pull_subject(
    subject_id: str, boundary: ReconciliationBoundary | None = None, ledger: CompletionLedger | None = None
) -> MergeResult | None:
    """Merge the server's records into the ledger. Returns None when the server could not be reached."""
    boundary = boundary or get_boundary()
    ledger = ledger or CompletionLedger()
    try:
        server_records = boundary.pull_server_state(subject_id)
    except ReconciliationError as e:
        logger.warning("Pull for subject %s failed: %s", subject_id, e)
        return None
    return ledger.apply_server_state(subject_id, server_records)
