import uuid

from django.conf import settings
from django.db import models

from mch_care.utils.db import BaseModel


class Child(BaseModel):
    child_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="children")
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    date_of_birth = models.DateField()

    class Meta:
        verbose_name_plural = "children"

    def __str__(self):
        return f"{self.first_name} {self.last_name}".strip()


class Pregnancy(BaseModel):
    pregnancy_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="pregnancies")
    mother_name = models.CharField(max_length=200)
    expected_delivery_date = models.DateField()
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name_plural = "pregnancies"

    def __str__(self):
        return f"{self.mother_name} (EDD {self.expected_delivery_date:%Y-%m-%d})"
