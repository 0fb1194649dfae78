import datetime

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from registry.models import Child, User, Vaccine, VaccinationSchedule, VaccineInventory


@pytest.fixture(autouse=True)
def _clear_cache():
    # locmem survives between tests; throttles and catalogue payloads live there
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def doctor(db):
    return User.objects.create_user(username='doc', password='P@ssw0rd1', role=User.ROLE_DOCTOR,
                                    email='doc@example.com', first_name='Ana', last_name='Ruiz')


@pytest.fixture
def nurse(db):
    return User.objects.create_user(username='nurse', password='P@ssw0rd1', role=User.ROLE_NURSE,
                                    email='nurse@example.com')


@pytest.fixture
def parent(db):
    return User.objects.create_user(username='parent', password='P@ssw0rd1', role=User.ROLE_PARENT,
                                    email='parent@example.com')


@pytest.fixture
def client_for():
    def make(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client
    return make


@pytest.fixture
def child(db):
    today = timezone.localdate()
    return Child.objects.create(
        first_name='Lucas', last_name='Benitez', document_number='1234567',
        date_of_birth=today - datetime.timedelta(days=200), gender='M',
    )


@pytest.fixture
def vaccine(db):
    return Vaccine.objects.create(name='Rotavirus', disease_prevented='Gastroenteritis por rotavirus', dose_count=2)


@pytest.fixture
def schedule(vaccine):
    return [
        VaccinationSchedule.objects.create(vaccine=vaccine, country_code='PY', dose_number=1, recommended_age_months=2),
        VaccinationSchedule.objects.create(vaccine=vaccine, country_code='PY', dose_number=2, recommended_age_months=4),
    ]


@pytest.fixture
def batch(vaccine, doctor):
    return VaccineInventory.objects.create(
        vaccine=vaccine, batch_number='RV-001', quantity=20,
        expiration_date=timezone.localdate() + datetime.timedelta(days=365),
        received_by=doctor,
    )
