"""
Subject registry: resolves the reference date a schedule is computed against.

Vaccination schedules are anchored on a child's date of birth; prenatal
checkups and pregnancy milestones on a pregnancy's expected delivery date.
Subject ids are the public UUIDs of Child / Pregnancy.
"""

import datetime
import uuid

from django.core.exceptions import ObjectDoesNotExist

from mch_care.schedules.templates import ScheduleDomain
from mch_care.subjects.models import Child, Pregnancy


class SubjectNotFound(Exception):
    def __init__(self, domain, subject_id):
        self.domain = domain
        self.subject_id = subject_id
        super().__init__(f"No subject {subject_id} for {domain} schedules")


def get_subject(domain: ScheduleDomain, subject_id: str, owner=None) -> Child | Pregnancy:
    try:
        subject_uuid = uuid.UUID(str(subject_id))
    except ValueError:
        raise SubjectNotFound(domain, subject_id) from None

    if ScheduleDomain(domain).is_gestational:
        queryset = Pregnancy.objects.filter(pregnancy_id=subject_uuid)
    else:
        queryset = Child.objects.filter(child_id=subject_uuid)
    if owner is not None:
        queryset = queryset.filter(owner=owner)

    try:
        return queryset.get()
    except ObjectDoesNotExist:
        raise SubjectNotFound(domain, subject_id) from None


def reference_date_of(subject: Child | Pregnancy) -> datetime.date:
    if isinstance(subject, Pregnancy):
        return subject.expected_delivery_date
    return subject.date_of_birth


def get_reference_date(domain: ScheduleDomain, subject_id: str, owner=None) -> datetime.date:
    return reference_date_of(get_subject(domain, subject_id, owner=owner))


def subject_key(subject: Child | Pregnancy) -> str:
    """Ledger key for a subject: its UUID in canonical lowercase form, whatever case it was requested in."""
    if isinstance(subject, Pregnancy):
        return str(subject.pregnancy_id)
    return str(subject.child_id)


def owned_subject_key(owner, subject_id: str) -> str | None:
    """Ledger key of the child or pregnancy ``subject_id`` if ``owner`` owns it, else None."""
    try:
        subject_uuid = uuid.UUID(str(subject_id))
    except ValueError:
        return None
    if Child.objects.filter(child_id=subject_uuid, owner=owner).exists():
        return str(subject_uuid)
    if Pregnancy.objects.filter(pregnancy_id=subject_uuid, owner=owner).exists():
        return str(subject_uuid)
    return None
