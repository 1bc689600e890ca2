from django.core.management.base import BaseCommand, CommandError

from mch_care.schedules.exceptions import InvalidTemplateError
from mch_care.schedules.templates import TEMPLATE_SOURCES, load_template


class Command(BaseCommand):
    help = "Validate the registered schedule templates."

    def handle(self, *args, **options):
        load_template.cache_clear()
        failures = []
        for domain in TEMPLATE_SOURCES:
            try:
                template = load_template(domain)
            except InvalidTemplateError as e:
                failures.append(str(domain))
                for problem in e.problems:
                    self.stderr.write(f"{domain}: {problem}")
                continue

            grace = template.grace_window
            self.stdout.write(
                f"{domain} v{template.version}: {len(template)} milestones, "
                f"grace {grace.amount} {grace.unit}"
            )

        if failures:
            raise CommandError(f"Invalid schedule templates: {', '.join(failures)}")
        self.stdout.write(self.style.SUCCESS("All schedule templates are valid."))
