import datetime
from unittest import mock

import pytest
from rest_framework.test import APIClient

from mch_care.ledger.ledger import CompletionLedger
from mch_care.ledger.models import SyncStatus
from mch_care.ledger.tests.factories import CompletionRecordFactory
from mch_care.schedules.exceptions import InvalidTemplateError
from mch_care.subjects.models import Child, Pregnancy
from mch_care.subjects.tests.factories import ChildFactory


def _completion_url(subject_id, milestone_id, domain="vaccination"):
    return f"/api/subjects/{subject_id}/{domain}/completions/{milestone_id}/"


@pytest.fixture
def auth_client(user, api_client: APIClient) -> APIClient:
    api_client.force_authenticate(user)
    return api_client


@pytest.mark.django_db
def test_requires_authentication(api_client: APIClient, child: Child):
    response = api_client.get(f"/api/subjects/{child.child_id}/vaccination/timeline/")
    assert response.status_code in (401, 403)


def test_list_schedules(auth_client: APIClient):
    response = auth_client.get("/api/schedules/")

    assert response.status_code == 200
    assert [schedule["domain"] for schedule in response.json()] == [
        "vaccination",
        "prenatal_checkup",
        "pregnancy_milestone",
    ]


def test_schedule_detail(auth_client: APIClient):
    response = auth_client.get("/api/schedules/vaccination/")

    assert response.status_code == 200
    data = response.json()
    assert data["offset_unit"] == "months"
    assert data["grace_window"] == {"amount": 14, "unit": "days"}
    assert len(data["milestones"]) == 18
    assert data["milestones"][0]["milestone_id"] == "bcg"


def test_unknown_schedule(auth_client: APIClient):
    assert auth_client.get("/api/schedules/dental/").status_code == 404


def test_invalid_schedule_is_unavailable(auth_client: APIClient, child: Child):
    with mock.patch(
        "mch_care.schedules.api.views.load_template",
        side_effect=InvalidTemplateError("vaccination", ["duplicate milestone_id 'bcg'"]),
    ):
        response = auth_client.get(f"/api/subjects/{child.child_id}/vaccination/timeline/")

    assert response.status_code == 503


def test_vaccination_timeline(auth_client: APIClient, child: Child):
    response = auth_client.get(f"/api/subjects/{child.child_id}/vaccination/timeline/", {"today": "2024-03-20"})

    assert response.status_code == 200
    data = response.json()
    assert data["reference_date"] == "2024-01-15"
    assert data["current_offset"] == 2
    assert data["total_count"] == 18
    assert data["overdue_count"] == 3
    assert data["due_count"] == 3
    assert data["completion_percentage"] == 0
    assert data["next_item"]["milestone_id"] == "penta1"
    assert data["next_item"]["target_date"] == "2024-03-15"
    assert data["items"][0]["completed_at"] is None


def test_pregnancy_timeline(auth_client: APIClient, pregnancy: Pregnancy):
    url = f"/api/subjects/{pregnancy.pregnancy_id}/prenatal_checkup/timeline/"
    response = auth_client.get(url, {"today": "2024-08-17"})

    assert response.status_code == 200
    data = response.json()
    assert data["current_offset"] == 12
    assert data["next_item"]["milestone_id"] == "anc_w12"
    assert data["next_item"]["status"] == "due"


@pytest.mark.parametrize("value", ["yesterday", "2024-03-01garbage", "2024-03-20T25:00"])
def test_timeline_bad_date(auth_client: APIClient, child: Child, value):
    response = auth_client.get(f"/api/subjects/{child.child_id}/vaccination/timeline/", {"today": value})
    assert response.status_code == 400


def test_timeline_for_wrong_subject_type(auth_client: APIClient, child: Child):
    assert auth_client.get(f"/api/subjects/{child.child_id}/prenatal_checkup/timeline/").status_code == 404


def test_timeline_for_another_users_child(auth_client: APIClient):
    other_child = ChildFactory()
    assert auth_client.get(f"/api/subjects/{other_child.child_id}/vaccination/timeline/").status_code == 404


def test_record_completion(auth_client: APIClient, child: Child):
    response = auth_client.put(
        _completion_url(child.child_id, "bcg"),
        {"completed_at": "2024-01-16", "details": {"batch_number": "B-77", "administered_by": "PHM Silva"}},
        format="json",
    )

    assert response.status_code == 200
    assert response.json()["sync_status"] == "pending"
    assert response.json()["local_revision"] == 1
    record = CompletionLedger().get_record(str(child.child_id), "bcg")
    assert record.completed_at == datetime.date(2024, 1, 16)
    assert record.details == {"batch_number": "B-77", "administered_by": "PHM Silva"}
    assert record.modified_by == child.owner.username

    timeline = auth_client.get(f"/api/subjects/{child.child_id}/vaccination/timeline/", {"today": "2024-03-20"}).json()
    assert timeline["completed_count"] == 1
    assert timeline["items"][0]["status"] == "completed"
    assert timeline["items"][0]["completed_at"] == "2024-01-16"
    assert timeline["items"][0]["sync_status"] == "pending"


def test_record_completion_rejects_details_from_another_domain(auth_client: APIClient, child: Child):
    response = auth_client.put(_completion_url(child.child_id, "bcg"), {"details": {"weight_kg": 3.1}}, format="json")

    assert response.status_code == 400
    assert "details" in response.json()
    assert CompletionLedger().get(str(child.child_id)) == []


def test_record_completion_for_unknown_milestone(auth_client: APIClient, child: Child):
    url = _completion_url(child.child_id, "anc_w12")
    response = auth_client.put(url, {"completed_at": "2024-01-16"}, format="json")
    assert response.status_code == 404


def test_remove_completion(auth_client: APIClient, child: Child):
    CompletionRecordFactory(subject_id=str(child.child_id), milestone_id="bcg", sync_status=SyncStatus.synced)

    assert auth_client.delete(_completion_url(child.child_id, "bcg")).status_code == 204
    assert CompletionLedger().get(str(child.child_id)) == []
    assert auth_client.delete(_completion_url(child.child_id, "bcg")).status_code == 404


def test_retry_failed_completion(auth_client: APIClient, child: Child):
    CompletionRecordFactory(subject_id=str(child.child_id), milestone_id="bcg", sync_status=SyncStatus.failed)

    response = auth_client.post(f"{_completion_url(child.child_id, 'bcg')}retry/")

    assert response.status_code == 200
    assert response.json()["sync_status"] == "pending"
    assert auth_client.post(f"{_completion_url(child.child_id, 'bcg')}retry/").status_code == 409


def test_list_completions(auth_client: APIClient, child: Child):
    subject_id = str(child.child_id)
    CompletionRecordFactory(subject_id=subject_id, milestone_id="bcg", sync_status=SyncStatus.synced)
    CompletionRecordFactory(subject_id=subject_id, milestone_id="opv0", sync_status=SyncStatus.failed)

    response = auth_client.get(f"/api/subjects/{subject_id}/completions/")

    assert response.status_code == 200
    data = response.json()
    assert data["summary"] == {"pending": 0, "synced": 1, "failed": 1}
    assert [record["milestone_id"] for record in data["completions"]] == ["bcg", "opv0"]


def test_list_completions_for_another_users_subject(auth_client: APIClient):
    other_child = ChildFactory()
    assert auth_client.get(f"/api/subjects/{other_child.child_id}/completions/").status_code == 404


@mock.patch("mch_care.schedules.api.views.pull_server_completions")
@mock.patch("mch_care.schedules.api.views.push_pending_completions")
def test_sync_queues_push(push_task, pull_task, auth_client: APIClient, child: Child):
    response = auth_client.post(f"/api/subjects/{child.child_id}/sync/")

    assert response.status_code == 202
    push_task.delay.assert_called_once_with(str(child.child_id))
    pull_task.delay.assert_not_called()


@mock.patch("mch_care.schedules.api.views.pull_server_completions")
@mock.patch("mch_care.schedules.api.views.push_pending_completions")
def test_sync_with_pull(push_task, pull_task, auth_client: APIClient, pregnancy: Pregnancy):
    response = auth_client.post(f"/api/subjects/{pregnancy.pregnancy_id}/sync/", {"pull": True}, format="json")

    assert response.status_code == 202
    push_task.delay.assert_called_once_with(str(pregnancy.pregnancy_id))
    pull_task.delay.assert_called_once_with(str(pregnancy.pregnancy_id))


def test_subject_id_case_does_not_split_the_ledger(auth_client: APIClient, child: Child):
    upper_id = str(child.child_id).upper()
    lower_id = str(child.child_id)

    response = auth_client.put(_completion_url(upper_id, "bcg"), {"completed_at": "2024-01-16"}, format="json")
    assert response.status_code == 200
    assert response.json()["subject_id"] == lower_id

    timeline = auth_client.get(f"/api/subjects/{lower_id}/vaccination/timeline/", {"today": "2024-03-20"}).json()
    assert timeline["items"][0]["milestone_id"] == "bcg"
    assert timeline["items"][0]["status"] == "completed"

    completions = auth_client.get(f"/api/subjects/{upper_id}/completions/").json()
    assert completions["subject_id"] == lower_id
    assert [record["milestone_id"] for record in completions["completions"]] == ["bcg"]

    assert auth_client.delete(_completion_url(upper_id, "bcg")).status_code == 204
    assert CompletionLedger().get(lower_id) == []


@mock.patch("mch_care.schedules.api.views.pull_server_completions")
@mock.patch("mch_care.schedules.api.views.push_pending_completions")
def test_sync_queues_canonical_subject_id(push_task, pull_task, auth_client: APIClient, child: Child):
    response = auth_client.post(f"/api/subjects/{str(child.child_id).upper()}/sync/")

    assert response.status_code == 202
    push_task.delay.assert_called_once_with(str(child.child_id))
