import datetime

from factory import Faker, Sequence
from factory.django import DjangoModelFactory

from mch_care.ledger.models import CompletionRecord, SyncStatus


class CompletionRecordFactory(DjangoModelFactory):
    subject_id = Faker("uuid4")
    milestone_id = Sequence(lambda n: f"milestone_{n}")
    completed_at = datetime.date(2024, 3, 15)
    sync_status = SyncStatus.pending
    local_revision = 1

    class Meta:
        model = CompletionRecord
