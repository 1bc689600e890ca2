from django.core.management.base import BaseCommand, CommandError

from mch_care.ledger.ledger import CompletionLedger
from mch_care.schedules.evaluator import evaluate
from mch_care.schedules.exceptions import ScheduleError
from mch_care.schedules.templates import load_template
from mch_care.subjects.registry import SubjectNotFound, get_subject, reference_date_of, subject_key
from mch_care.utils.datetime import parse_iso_date, today


class Command(BaseCommand):
    help = "Print the care timeline of a child or pregnancy."

    def add_arguments(self, parser):
        parser.add_argument("subject_id", type=str)
        parser.add_argument("domain", type=str, help="vaccination, prenatal_checkup or pregnancy_milestone")
        parser.add_argument("--today", type=str, help="Evaluate as of this date (YYYY-MM-DD).")

    def handle(self, subject_id, domain, **options):
        on_date = today()
        if options.get("today"):
            on_date = parse_iso_date(options["today"])
            if on_date is None:
                raise CommandError(f"Invalid date: {options['today']}")

        try:
            template = load_template(domain)
            subject = get_subject(template.domain, subject_id)
        except (ScheduleError, SubjectNotFound) as e:
            raise CommandError(str(e))

        records = CompletionLedger().get(subject_key(subject))
        timeline = evaluate(template, reference_date_of(subject), on_date, records)

        self.stdout.write(
            f"{template.domain} for {subject_id} as of {on_date} "
            f"({timeline.current_offset} {template.domain.offset_unit})"
        )
        for group, items in timeline.groups():
            self.stdout.write(group)
            for item in items:
                self.stdout.write(f"  {item.target_date}  {item.status:<9}  {item.milestone.label}")

        self.stdout.write(
            f"{timeline.completed_count}/{timeline.total_count} completed ({timeline.completion_percentage}%), "
            f"{timeline.due_count} due, {timeline.overdue_count} overdue"
        )
        if timeline.next_item is not None:
            self.stdout.write(f"Next: {timeline.next_item.milestone.label} on {timeline.next_item.target_date}")
