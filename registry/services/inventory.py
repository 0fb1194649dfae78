"""
Vaccine stock management.

Batches are keyed by (vaccine, batch number).  Quantity changes always go
through the model's ``increase_quantity`` / ``decrease_quantity`` so the
AVAILABLE <-> DEPLETED flip happens in exactly one place; status changes
requested by staff are applied as given.
"""
from __future__ import annotations

import datetime
import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from registry.exceptions import BusinessRuleViolation, DuplicateResource, ResourceNotFound
from registry.models import VaccineInventory
from registry.services.audit import (
    INVENTORY_ADDED,
    INVENTORY_QUANTITY_CHANGED,
    INVENTORY_STATUS_CHANGED,
    log_action,
)
from registry.services.notifications import notify_inventory_alerts
from registry.services.vaccines import get_vaccine

logger = logging.getLogger(__name__)

User = get_user_model()


def format_batch(b: VaccineInventory) -> dict:
    return {
        'id': b.id,
        'vaccineId': b.vaccine_id,
        'vaccineName': b.vaccine.name,
        'batchNumber': b.batch_number,
        'quantity': b.quantity,
        'manufactureDate': b.manufacture_date.isoformat() if b.manufacture_date else None,
        'expirationDate': b.expiration_date.isoformat(),
        'storageLocation': b.storage_location or None,
        'status': b.status,
        'receivedDate': b.received_date.isoformat() if b.received_date else None,
        'receivedById': b.received_by_id,
        'notes': b.notes or None,
        'createdAt': b.created_at.isoformat() if b.created_at else None,
        'updatedAt': b.updated_at.isoformat() if b.updated_at else None,
    }


def _qs():
    return VaccineInventory.objects.select_related('vaccine')


@transaction.atomic
def add_batch(*, vaccine_id: int, batch_number: str, quantity: int, expiration_date: datetime.date,
              received_by_id: int, manufacture_date: Optional[datetime.date] = None,
              storage_location: str = '', received_date: Optional[datetime.date] = None,
              notes: str = '') -> VaccineInventory:
    vaccine = get_vaccine(vaccine_id)
    receiver = User.objects.filter(id=received_by_id).first()
    if receiver is None:
        raise ResourceNotFound('User', 'id', received_by_id)
    if VaccineInventory.objects.filter(vaccine=vaccine, batch_number=batch_number).exists():
        raise DuplicateResource('Inventory batch', 'batch number', batch_number)
    if manufacture_date and expiration_date <= manufacture_date:
        raise BusinessRuleViolation('Expiration date must be after manufacture date')
    if expiration_date < timezone.localdate():
        raise BusinessRuleViolation('Cannot add expired vaccine to inventory')
    if quantity < 0:
        raise BusinessRuleViolation('Quantity cannot be negative')

    batch = VaccineInventory.objects.create(
        vaccine=vaccine,
        batch_number=batch_number,
        quantity=quantity,
        manufacture_date=manufacture_date,
        expiration_date=expiration_date,
        storage_location=storage_location or '',
        received_date=received_date or timezone.localdate(),
        received_by=receiver,
        notes=notes or '',
        status=VaccineInventory.STATUS_AVAILABLE if quantity > 0 else VaccineInventory.STATUS_DEPLETED,
    )
    log_action(user=receiver, action=INVENTORY_ADDED, object_type='inventory', object_id=batch.id,
               detail={'batchNumber': batch_number, 'quantity': quantity})
    notify_inventory_alerts(batch)
    logger.info("batch %s of vaccine %s received (%d doses)", batch_number, vaccine.id, quantity)
    return batch


def get_batch(batch_id: int) -> VaccineInventory:
    batch = _qs().filter(id=batch_id).first()
    if batch is None:
        raise ResourceNotFound('Inventory batch', 'id', batch_id)
    return batch


def list_batches() -> list[VaccineInventory]:
    return list(_qs().order_by('expiration_date', 'id'))


def available_for_vaccine(vaccine_id: int) -> list[VaccineInventory]:
    vaccine = get_vaccine(vaccine_id)
    return list(
        _qs().filter(vaccine=vaccine, status=VaccineInventory.STATUS_AVAILABLE, quantity__gt=0)
        .order_by('expiration_date', 'id')
    )


def expiring_within(days: Optional[int] = None) -> list[VaccineInventory]:
    days = settings.EXPIRATION_WARNING_DAYS if days is None else days
    today = timezone.localdate()
    return list(
        _qs().filter(expiration_date__range=(today, today + datetime.timedelta(days=days)))
        .exclude(status__in=[VaccineInventory.STATUS_EXPIRED, VaccineInventory.STATUS_RECALLED])
        .order_by('expiration_date', 'id')
    )


def low_stock(threshold: Optional[int] = None) -> list[VaccineInventory]:
    threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    return list(
        _qs().filter(status=VaccineInventory.STATUS_AVAILABLE, quantity__lt=threshold)
        .order_by('quantity', 'expiration_date', 'id')
    )


def total_available(vaccine_id: int) -> int:
    vaccine = get_vaccine(vaccine_id)
    total = VaccineInventory.objects.filter(
        vaccine=vaccine, status=VaccineInventory.STATUS_AVAILABLE
    ).aggregate(total=Sum('quantity'))['total']
    return total or 0


@transaction.atomic
def set_quantity(batch_id: int, new_quantity: int, *, user=None) -> VaccineInventory:
    """Move a batch to ``new_quantity`` through increase/decrease."""
    if new_quantity < 0:
        raise BusinessRuleViolation('Quantity cannot be negative')
    batch = _qs().select_for_update().filter(id=batch_id).first()
    if batch is None:
        raise ResourceNotFound('Inventory batch', 'id', batch_id)
    previous = batch.quantity
    difference = new_quantity - previous
    if difference > 0:
        batch.increase_quantity(difference)
    elif difference < 0:
        batch.decrease_quantity(-difference)
    batch.save(update_fields=['quantity', 'status', 'updated_at'])
    log_action(user=user, action=INVENTORY_QUANTITY_CHANGED, object_type='inventory', object_id=batch.id,
               detail={'from': previous, 'to': batch.quantity, 'status': batch.status})
    notify_inventory_alerts(batch, previous_quantity=previous)
    return batch


@transaction.atomic
def deduct_dose(vaccine, batch_number: str, *, amount: int = 1) -> Optional[VaccineInventory]:
    """Take doses out of a batch; ``None`` when the batch is not stocked here.

    A stocked batch must be AVAILABLE and hold enough doses, otherwise the
    whole administration is refused.
    """
    batch = _qs().select_for_update().filter(vaccine=vaccine, batch_number=batch_number).first()
    if batch is None:
        return None
    if batch.status != VaccineInventory.STATUS_AVAILABLE:
        raise BusinessRuleViolation(f"Batch {batch_number} is not available (status {batch.status})")
    previous = batch.quantity
    batch.decrease_quantity(amount)
    batch.save(update_fields=['quantity', 'status', 'updated_at'])
    notify_inventory_alerts(batch, previous_quantity=previous)
    return batch


@transaction.atomic
def set_status(batch_id: int, new_status: str, *, user=None) -> VaccineInventory:
    if new_status not in dict(VaccineInventory.STATUS_CHOICES):
        raise BusinessRuleViolation(f"Unknown inventory status: {new_status}")
    batch = _qs().select_for_update().filter(id=batch_id).first()
    if batch is None:
        raise ResourceNotFound('Inventory batch', 'id', batch_id)
    previous = batch.status
    batch.status = new_status
    batch.save(update_fields=['status', 'updated_at'])
    log_action(user=user, action=INVENTORY_STATUS_CHANGED, object_type='inventory', object_id=batch.id,
               detail={'from': previous, 'to': new_status})
    return batch


@transaction.atomic
def expire_past_batches(today: Optional[datetime.date] = None) -> int:
    """Mark AVAILABLE/RESERVED batches past their expiration date as EXPIRED."""
    today = today or timezone.localdate()
    count = VaccineInventory.objects.filter(
        expiration_date__lt=today,
        status__in=[VaccineInventory.STATUS_AVAILABLE, VaccineInventory.STATUS_RESERVED],
    ).update(status=VaccineInventory.STATUS_EXPIRED, updated_at=timezone.now())
    if count:
        logger.info("%d inventory batches marked expired", count)
    return count
