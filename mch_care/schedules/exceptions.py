class ScheduleError(Exception):
    pass


class TemplateNotFoundError(ScheduleError):
    """No template is registered for the requested domain."""

    def __init__(self, domain):
        self.domain = domain
        super().__init__(f"No schedule template registered for domain: {domain!r}")


class InvalidTemplateError(ScheduleError):
    """Seed data for a template failed load-time validation."""

    def __init__(self, domain, problems: list[str]):
        self.domain = domain
        self.problems = problems
        super().__init__(f"Invalid schedule template for {domain}: {'; '.join(problems)}")
