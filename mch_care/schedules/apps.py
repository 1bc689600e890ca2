from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class SchedulesConfig(AppConfig):
    name = "mch_care.schedules"
    verbose_name = _("Care Schedules")
