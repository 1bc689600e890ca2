"""
Timeline evaluation for care schedules.

Computes per-milestone status (completed, overdue, due, upcoming) for a
subject from a schedule template, a reference date, "today" and a snapshot of
the subject's completion records, and aggregates progress metrics.

Reference dates:
- Vaccination: the child's date of birth. Milestone dates use calendar-month
  arithmetic.
- Prenatal checkups / pregnancy milestones: the expected delivery date. The
  conception date is estimated as EDD - 40 weeks and milestone dates and the
  current gestational week are counted from it.

``evaluate`` is pure: no I/O, no clock reads, no settings lookups. It is safe
to call on every request.
"""

import datetime
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from mch_care.schedules.templates import GraceUnit, GraceWindow, MilestoneDef, ScheduleDomain, ScheduleTemplate
from mch_care.utils.datetime import add_months, estimated_conception_date, gestational_week, months_between


class MilestoneStatus(StrEnum):
    COMPLETED = "completed"
    OVERDUE = "overdue"
    DUE = "due"
    UPCOMING = "upcoming"


ACTIONABLE_STATUSES = (MilestoneStatus.UPCOMING, MilestoneStatus.DUE)


@dataclass(frozen=True)
class TimelineItem:
    milestone: MilestoneDef
    status: MilestoneStatus
    target_date: datetime.date
    completion: Any = None

    @property
    def milestone_id(self) -> str:
        return self.milestone.milestone_id

    @property
    def offset(self) -> int:
        return self.milestone.offset

    @property
    def is_completed(self) -> bool:
        return self.status == MilestoneStatus.COMPLETED


@dataclass(frozen=True)
class TimelineView:
    domain: ScheduleDomain
    reference_date: datetime.date
    today: datetime.date
    current_offset: int
    items: tuple[TimelineItem, ...]
    completed_count: int
    due_count: int
    upcoming_count: int
    overdue_count: int
    total_count: int
    completion_percentage: int
    next_item: TimelineItem | None

    @property
    def needs_attention_count(self) -> int:
        return self.due_count + self.overdue_count

    def items_with_status(self, status: MilestoneStatus) -> list[TimelineItem]:
        return [item for item in self.items if item.status == status]

    def groups(self) -> list[tuple[str, list[TimelineItem]]]:
        """Items grouped by milestone group (or offset when a milestone has no group), in timeline order."""
        grouped: dict[str, list[TimelineItem]] = {}
        for item in self.items:
            key = item.milestone.group or f"{item.offset} {self.domain.offset_unit}"
            grouped.setdefault(key, []).append(item)
        return list(grouped.items())


def completion_percentage(completed: int, total: int) -> int:
    """Percentage rounded half-up to an integer; 0 for an empty schedule."""
    if total <= 0:
        return 0
    return (completed * 200 + total) // (2 * total)


def milestone_target_date(domain: ScheduleDomain, reference_date: datetime.date, offset: int) -> datetime.date:
    if domain.is_gestational:
        return estimated_conception_date(reference_date) + datetime.timedelta(weeks=offset)
    return add_months(reference_date, offset)


def current_offset_units(domain: ScheduleDomain, reference_date: datetime.date, today: datetime.date) -> int:
    """Completed months of age for vaccination, current gestational week otherwise."""
    if domain.is_gestational:
        return gestational_week(reference_date, today)
    return months_between(reference_date, today)


def _elapsed(
    grace_window: GraceWindow,
    milestone: MilestoneDef,
    target_date: datetime.date,
    current_offset: int,
    today: datetime.date,
    domain: ScheduleDomain,
) -> int:
    if grace_window.unit == GraceUnit.DAYS:
        return (today - target_date).days
    if domain.is_gestational:
        return current_offset - milestone.offset
    return (today - target_date).days // 7


def milestone_status(
    milestone: MilestoneDef,
    target_date: datetime.date,
    completion,
    current_offset: int,
    today: datetime.date,
    domain: ScheduleDomain,
    grace_window: GraceWindow,
) -> MilestoneStatus:
    if completion is not None and getattr(completion, "completed_at", None) is not None:
        return MilestoneStatus.COMPLETED

    elapsed = _elapsed(grace_window, milestone, target_date, current_offset, today, domain)
    if elapsed < 0:
        return MilestoneStatus.UPCOMING
    if elapsed <= grace_window.amount:
        return MilestoneStatus.DUE
    return MilestoneStatus.OVERDUE


def evaluate(
    template: ScheduleTemplate,
    reference_date: datetime.date,
    today: datetime.date,
    records: Iterable = (),
    grace_window: GraceWindow | None = None,
) -> TimelineView:
    """
    Build the timeline for one subject.

    Args:
        template: A loaded ScheduleTemplate
        reference_date: Date of birth (vaccination) or expected delivery date
        today: The evaluation date
        records: The subject's completion records. Anything with
            ``milestone_id`` and ``completed_at`` attributes works; records
            for milestones outside the template are ignored.
        grace_window: Overrides the template's grace window

    Returns:
        TimelineView with items in ascending offset order
    """
    domain = template.domain
    grace_window = grace_window or template.grace_window
    completions = {record.milestone_id: record for record in records}
    current_offset = current_offset_units(domain, reference_date, today)

    items = []
    counts = {status: 0 for status in MilestoneStatus}
    for milestone in sorted(template.milestones, key=lambda m: m.offset):
        target_date = milestone_target_date(domain, reference_date, milestone.offset)
        completion = completions.get(milestone.milestone_id)
        status = milestone_status(milestone, target_date, completion, current_offset, today, domain, grace_window)
        counts[status] += 1
        items.append(TimelineItem(milestone=milestone, status=status, target_date=target_date, completion=completion))

    next_item = next((item for item in items if item.status in ACTIONABLE_STATUSES), None)
    total = len(items)

    return TimelineView(
        domain=domain,
        reference_date=reference_date,
        today=today,
        current_offset=current_offset,
        items=tuple(items),
        completed_count=counts[MilestoneStatus.COMPLETED],
        due_count=counts[MilestoneStatus.DUE],
        upcoming_count=counts[MilestoneStatus.UPCOMING],
        overdue_count=counts[MilestoneStatus.OVERDUE],
        total_count=total,
        completion_percentage=completion_percentage(counts[MilestoneStatus.COMPLETED], total),
        next_item=next_item,
    )
