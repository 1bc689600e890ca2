"""
Schedule templates: immutable, validated milestone definitions per domain.

Templates are built from the seed data in ``definitions`` and validated once
when loaded. Evaluation never re-validates a template.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from functools import lru_cache

from django.conf import settings

from mch_care.schedules import definitions
from mch_care.schedules.exceptions import InvalidTemplateError, TemplateNotFoundError

logger = logging.getLogger(__name__)


class ScheduleDomain(StrEnum):
    VACCINATION = "vaccination"
    PRENATAL_CHECKUP = "prenatal_checkup"
    PREGNANCY_MILESTONE = "pregnancy_milestone"

    @property
    def is_gestational(self) -> bool:
        return self != ScheduleDomain.VACCINATION

    @property
    def offset_unit(self) -> str:
        return "weeks" if self.is_gestational else "months"


class GraceUnit(StrEnum):
    DAYS = "days"
    WEEKS = "weeks"


@dataclass(frozen=True)
class GraceWindow:
    amount: int = 0
    unit: GraceUnit = GraceUnit.DAYS

    @classmethod
    def from_config(cls, config: dict) -> "GraceWindow":
        return cls(amount=int(config.get("amount", 0)), unit=GraceUnit(config.get("unit", GraceUnit.DAYS)))


DEFAULT_GRACE_WINDOWS = {
    ScheduleDomain.VACCINATION: GraceWindow(14, GraceUnit.DAYS),
    ScheduleDomain.PRENATAL_CHECKUP: GraceWindow(0, GraceUnit.WEEKS),
    ScheduleDomain.PREGNANCY_MILESTONE: GraceWindow(0, GraceUnit.WEEKS),
}


@dataclass(frozen=True)
class MilestoneDef:
    milestone_id: str
    offset: int
    label: str
    short_label: str | None = None
    description: str | None = None
    group: str | None = None

    @property
    def display_label(self) -> str:
        return self.short_label or self.label


@dataclass(frozen=True)
class ScheduleTemplate:
    domain: ScheduleDomain
    milestones: tuple[MilestoneDef, ...]
    grace_window: GraceWindow = field(default_factory=GraceWindow)
    version: int = 1

    @property
    def milestone_ids(self) -> list[str]:
        return [milestone.milestone_id for milestone in self.milestones]

    def get_milestone(self, milestone_id: str) -> MilestoneDef | None:
        for milestone in self.milestones:
            if milestone.milestone_id == milestone_id:
                return milestone
        return None

    def __len__(self) -> int:
        return len(self.milestones)


# =============================================================================
# Template Registry
# =============================================================================

TEMPLATE_SOURCES = {
    ScheduleDomain.VACCINATION: {
        "name": "National Immunization Schedule",
        "version": definitions.VACCINATION_SCHEDULE_VERSION,
        "milestones": definitions.VACCINATION_MILESTONES,
    },
    ScheduleDomain.PRENATAL_CHECKUP: {
        "name": "Prenatal Checkups",
        "version": definitions.PRENATAL_CHECKUP_SCHEDULE_VERSION,
        "milestones": definitions.PRENATAL_CHECKUP_MILESTONES,
    },
    ScheduleDomain.PREGNANCY_MILESTONE: {
        "name": "Pregnancy Milestones",
        "version": definitions.PREGNANCY_MILESTONE_SCHEDULE_VERSION,
        "milestones": definitions.PREGNANCY_MILESTONES,
    },
}


def _coerce_domain(domain) -> ScheduleDomain:
    try:
        return ScheduleDomain(domain)
    except ValueError:
        raise TemplateNotFoundError(domain) from None


def get_grace_window(domain: ScheduleDomain) -> GraceWindow:
    """Grace window for a domain from the MCH_SCHEDULE_GRACE setting, falling back to the defaults."""
    overrides = getattr(settings, "MCH_SCHEDULE_GRACE", {}) or {}
    config = overrides.get(str(domain))
    if config is None:
        return DEFAULT_GRACE_WINDOWS[domain]
    return GraceWindow.from_config(config)


def build_template(domain, milestones: list[dict], grace_window: GraceWindow | None = None, version: int = 1):
    """
    Validate raw milestone dicts and build an immutable template.

    Args:
        domain: A ScheduleDomain (or its string value)
        milestones: Dicts with milestone_id, offset, label and optional
            short_label, description, group
        grace_window: Defaults to the domain's configured window
        version: Template version

    Raises:
        TemplateNotFoundError: If the domain is unknown
        InvalidTemplateError: For missing ids/labels, duplicate ids or
            negative/non-integer offsets
    """
    domain = _coerce_domain(domain)
    problems = []
    seen = set()
    defs = []
    previous_offset = None

    for position, raw in enumerate(milestones):
        milestone_id = raw.get("milestone_id")
        offset = raw.get("offset")
        label = raw.get("label")

        if not milestone_id:
            problems.append(f"milestone #{position} has no milestone_id")
            continue
        if milestone_id in seen:
            problems.append(f"duplicate milestone_id {milestone_id!r}")
        seen.add(milestone_id)

        if isinstance(offset, bool) or not isinstance(offset, int):
            problems.append(f"{milestone_id!r} has a non-integer offset {offset!r}")
            continue
        if offset < 0:
            problems.append(f"{milestone_id!r} has a negative offset {offset}")
        if not label:
            problems.append(f"{milestone_id!r} has no label")

        if previous_offset is not None and offset < previous_offset:
            logger.warning("Template %s declares %r out of chronological order", domain, milestone_id)
        previous_offset = offset

        defs.append(
            MilestoneDef(
                milestone_id=milestone_id,
                offset=offset,
                label=label or "",
                short_label=raw.get("short_label"),
                description=raw.get("description"),
                group=raw.get("group"),
            )
        )

    if problems:
        raise InvalidTemplateError(domain, problems)

    return ScheduleTemplate(
        domain=domain,
        milestones=tuple(defs),
        grace_window=grace_window or get_grace_window(domain),
        version=version,
    )


@lru_cache
def load_template(domain) -> ScheduleTemplate:
    """
    Load the registered template for a domain. Cached per process.

    Raises:
        TemplateNotFoundError: If no template is registered for the domain
        InvalidTemplateError: If the seed data is malformed
    """
    domain = _coerce_domain(domain)
    source = TEMPLATE_SOURCES.get(domain)
    if source is None:
        raise TemplateNotFoundError(domain)

    template = build_template(domain, source["milestones"], version=source["version"])
    logger.info("Loaded %s schedule v%s with %d milestones", domain, template.version, len(template))
    return template


def list_templates() -> list[dict]:
    """
    List registered templates.

    Returns:
        List of dicts with 'domain', 'name', 'version', 'offset_unit'
    """
    return [
        {
            "domain": str(domain),
            "name": source["name"],
            "version": source["version"],
            "offset_unit": domain.offset_unit,
        }
        for domain, source in TEMPLATE_SOURCES.items()
    ]
