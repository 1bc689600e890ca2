import datetime

from django.contrib.auth import get_user_model
from factory import Faker, Sequence, SubFactory
from factory.django import DjangoModelFactory, Password

from mch_care.subjects.models import Child, Pregnancy


class UserFactory(DjangoModelFactory):
    username = Sequence(lambda n: f"health_worker_{n}")
    email = Faker("email")
    password = Password(Faker("password", length=24))

    class Meta:
        model = get_user_model()
        django_get_or_create = ["username"]


class ChildFactory(DjangoModelFactory):
    owner = SubFactory(UserFactory)
    first_name = Faker("first_name")
    last_name = Faker("last_name")
    date_of_birth = datetime.date(2024, 1, 15)

    class Meta:
        model = Child


class PregnancyFactory(DjangoModelFactory):
    owner = SubFactory(UserFactory)
    mother_name = Faker("name")
    expected_delivery_date = datetime.date(2025, 3, 1)

    class Meta:
        model = Pregnancy
