import datetime

import pytest

from registry.exceptions import BusinessRuleViolation, InsufficientStock
from registry.models import Child, VaccineInventory

pytestmark = pytest.mark.django_db


def test_decrease_to_zero_depletes_available_batch(batch):
    batch.quantity = 3
    batch.decrease_quantity(3)
    assert batch.quantity == 0
    assert batch.status == VaccineInventory.STATUS_DEPLETED


def test_decrease_keeps_non_available_status(batch):
    batch.quantity = 2
    batch.status = VaccineInventory.STATUS_RESERVED
    batch.decrease_quantity(2)
    assert batch.quantity == 0
    assert batch.status == VaccineInventory.STATUS_RESERVED


def test_decrease_more_than_stock_is_rejected(batch):
    batch.quantity = 1
    with pytest.raises(InsufficientStock):
        batch.decrease_quantity(2)
    assert batch.quantity == 1


def test_negative_amounts_are_rejected(batch):
    with pytest.raises(BusinessRuleViolation):
        batch.decrease_quantity(-1)
    with pytest.raises(BusinessRuleViolation):
        batch.increase_quantity(-1)


def test_increase_revives_depleted_batch(batch):
    batch.quantity = 0
    batch.status = VaccineInventory.STATUS_DEPLETED
    batch.increase_quantity(5)
    assert batch.quantity == 5
    assert batch.status == VaccineInventory.STATUS_AVAILABLE


def test_increase_leaves_recalled_batch_alone(batch):
    batch.status = VaccineInventory.STATUS_RECALLED
    batch.increase_quantity(5)
    assert batch.status == VaccineInventory.STATUS_RECALLED


def test_is_expired(batch):
    assert not batch.is_expired()
    assert batch.is_expired(on=batch.expiration_date + datetime.timedelta(days=1))
    assert not batch.is_expired(on=batch.expiration_date)


def test_age_in_months_counts_whole_months():
    c = Child(date_of_birth=datetime.date(2024, 1, 31))
    assert c.age_in_months(datetime.date(2024, 2, 29)) == 0
    assert c.age_in_months(datetime.date(2024, 3, 31)) == 2
    assert c.age_in_months(datetime.date(2025, 1, 30)) == 11
    assert c.age_in_months(datetime.date(2025, 1, 31)) == 12


def test_active_manager_hides_soft_deleted(child):
    child.soft_delete()
    child.save()
    assert child.is_deleted
    assert not Child.objects.active().filter(id=child.id).exists()
    assert Child.objects.filter(id=child.id).exists()
