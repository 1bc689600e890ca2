import pytest

from mch_care.schedules.exceptions import InvalidTemplateError, TemplateNotFoundError
from mch_care.schedules.templates import (
    GraceUnit,
    GraceWindow,
    ScheduleDomain,
    build_template,
    get_grace_window,
    list_templates,
    load_template,
)


def _milestone(milestone_id, offset, label="Label"):
    return {"milestone_id": milestone_id, "offset": offset, "label": label}


@pytest.mark.parametrize(
    "domain, count, unit",
    [
        (ScheduleDomain.VACCINATION, 18, "months"),
        (ScheduleDomain.PRENATAL_CHECKUP, 12, "weeks"),
        (ScheduleDomain.PREGNANCY_MILESTONE, 10, "weeks"),
    ],
)
def test_load_registered_templates(domain, count, unit):
    template = load_template(domain)

    assert template.domain == domain
    assert len(template) == count
    assert domain.offset_unit == unit
    assert len(set(template.milestone_ids)) == count
    assert all(milestone.offset >= 0 for milestone in template.milestones)


def test_load_template_accepts_domain_string_and_is_cached():
    assert load_template("vaccination") is load_template(ScheduleDomain.VACCINATION)


def test_load_unknown_domain():
    with pytest.raises(TemplateNotFoundError) as exc_info:
        load_template("dental")
    assert exc_info.value.domain == "dental"


def test_default_grace_windows():
    assert load_template(ScheduleDomain.VACCINATION).grace_window == GraceWindow(14, GraceUnit.DAYS)
    assert load_template(ScheduleDomain.PRENATAL_CHECKUP).grace_window == GraceWindow(0, GraceUnit.WEEKS)


def test_grace_window_from_settings(settings):
    settings.MCH_SCHEDULE_GRACE = {"prenatal_checkup": {"amount": 1, "unit": "weeks"}}

    assert get_grace_window(ScheduleDomain.PRENATAL_CHECKUP) == GraceWindow(1, GraceUnit.WEEKS)
    assert get_grace_window(ScheduleDomain.VACCINATION) == GraceWindow(14, GraceUnit.DAYS)
    assert load_template(ScheduleDomain.PRENATAL_CHECKUP).grace_window.amount == 1


def test_get_milestone():
    template = load_template(ScheduleDomain.PREGNANCY_MILESTONE)

    assert template.get_milestone("heartbeat").offset == 8
    assert template.get_milestone("missing") is None


def test_build_template_rejects_duplicate_ids():
    with pytest.raises(InvalidTemplateError) as exc_info:
        build_template(ScheduleDomain.VACCINATION, [_milestone("bcg", 0), _milestone("bcg", 2)])
    assert exc_info.value.problems == ["duplicate milestone_id 'bcg'"]


@pytest.mark.parametrize("offset", [-1, 1.5, "2", None, True])
def test_build_template_rejects_bad_offsets(offset):
    with pytest.raises(InvalidTemplateError):
        build_template(ScheduleDomain.VACCINATION, [_milestone("bcg", offset)])


def test_build_template_collects_all_problems():
    milestones = [_milestone("", 0), _milestone("a", 0, label=""), _milestone("b", -2)]

    with pytest.raises(InvalidTemplateError) as exc_info:
        build_template(ScheduleDomain.PRENATAL_CHECKUP, milestones)

    assert exc_info.value.problems == [
        "milestone #0 has no milestone_id",
        "'a' has no label",
        "'b' has a negative offset -2",
    ]


def test_build_template_unknown_domain():
    with pytest.raises(TemplateNotFoundError):
        build_template("dental", [_milestone("a", 0)])


def test_build_template_allows_out_of_order_offsets(caplog):
    template = build_template(
        ScheduleDomain.VACCINATION,
        [_milestone("later", 4), _milestone("earlier", 2)],
        grace_window=GraceWindow(),
    )

    assert template.milestone_ids == ["later", "earlier"]
    assert "out of chronological order" in caplog.text


def test_list_templates():
    templates = {template["domain"]: template for template in list_templates()}

    assert set(templates) == {"vaccination", "prenatal_checkup", "pregnancy_milestone"}
    assert templates["vaccination"]["offset_unit"] == "months"
    assert templates["prenatal_checkup"]["version"] == 1
