import pytest
from rest_framework.test import APIClient

from mch_care.schedules.templates import load_template
from mch_care.subjects.models import Child, Pregnancy
from mch_care.subjects.tests.factories import ChildFactory, PregnancyFactory, UserFactory


@pytest.fixture(autouse=True)
def clear_template_cache():
    load_template.cache_clear()
    yield
    load_template.cache_clear()


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def user(db):
    return UserFactory()


@pytest.fixture
def child(user) -> Child:
    return ChildFactory(owner=user)


@pytest.fixture
def pregnancy(user) -> Pregnancy:
    return PregnancyFactory(owner=user)
