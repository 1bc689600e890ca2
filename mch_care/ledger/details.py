"""Typed completion details, one shape per schedule domain.

Stored on ``CompletionRecord`` as ``details_kind`` + a JSON ``details`` dict.
"""

import dataclasses
from typing import ClassVar

from mch_care.schedules.templates import ScheduleDomain


@dataclasses.dataclass(frozen=True)
class VaccinationDetails:
    kind: ClassVar[str] = ScheduleDomain.VACCINATION.value

    batch_number: str | None = None
    administered_by: str | None = None
    location: str | None = None
    notes: str | None = None
    side_effects: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class CheckupDetails:
    kind: ClassVar[str] = ScheduleDomain.PRENATAL_CHECKUP.value

    provider: str | None = None
    weight_kg: float | None = None
    blood_pressure: str | None = None
    fundal_height_cm: float | None = None
    fetal_heart_rate: int | None = None
    notes: str | None = None


@dataclasses.dataclass(frozen=True)
class MilestoneDetails:
    kind: ClassVar[str] = ScheduleDomain.PREGNANCY_MILESTONE.value

    notes: str | None = None


CompletionDetails = VaccinationDetails | CheckupDetails | MilestoneDetails

DETAILS_BY_KIND = {cls.kind: cls for cls in (VaccinationDetails, CheckupDetails, MilestoneDetails)}


def details_to_dict(details: CompletionDetails | None) -> dict:
    if details is None:
        return {}
    data = dataclasses.asdict(details)
    if "side_effects" in data:
        data["side_effects"] = list(data["side_effects"])
    return {key: value for key, value in data.items() if value not in (None, [])}


def details_from_dict(kind: str, data: dict | None) -> CompletionDetails | None:
    """
    Build the typed details for a domain.

    Raises:
        ValueError: If the kind is unknown or the data has fields the kind does not define
    """
    if not kind:
        return None
    details_class = DETAILS_BY_KIND.get(str(kind))
    if details_class is None:
        raise ValueError(f"Unknown details kind: {kind}")

    data = dict(data or {})
    allowed = {f.name for f in dataclasses.fields(details_class)}
    unexpected = sorted(set(data) - allowed)
    if unexpected:
        raise ValueError(f"Unexpected {kind} details: {', '.join(unexpected)}")
    if "side_effects" in data:
        data["side_effects"] = tuple(data["side_effects"] or ())
    return details_class(**data)
