"""
Appointment booking and status changes.

Status is a plain enumerated field: the setter accepts any value and
``confirm`` / ``complete`` / ``cancel`` are shortcuts over it.  The only
time-based rule is that a new (or moved) appointment must be in the future.
"""
from __future__ import annotations

import datetime
import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from registry.exceptions import BusinessRuleViolation, ResourceNotFound
from registry.models import Appointment, Child, ChildGuardian
from registry.services.children import get_child
from registry.services.notifications import notify_appointment_reminder

logger = logging.getLogger(__name__)

User = get_user_model()


def format_appointment(a: Appointment) -> dict:
    return {
        'id': a.id,
        'childId': a.child_id,
        'childName': a.child.full_name,
        'appointmentDate': a.appointment_date.isoformat(),
        'appointmentType': a.appointment_type,
        'status': a.status,
        'scheduledVaccines': a.scheduled_vaccines or None,
        'assignedToId': a.assigned_to_id,
        'assignedToName': (a.assigned_to.get_full_name() or a.assigned_to.username) if a.assigned_to else None,
        'notes': a.notes or None,
        'createdById': a.created_by_id,
        'createdAt': a.created_at.isoformat() if a.created_at else None,
        'updatedAt': a.updated_at.isoformat() if a.updated_at else None,
    }


def _qs():
    return Appointment.objects.select_related('child', 'assigned_to', 'created_by')


def _require_user(user_id: int, label: str = 'User'):
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise ResourceNotFound(label, 'id', user_id)
    return user


def _require_future(when: datetime.datetime) -> None:
    if when <= timezone.now():
        raise BusinessRuleViolation('Appointment date must be in the future')


@transaction.atomic
def create_appointment(*, child_id: int, appointment_date: datetime.datetime, appointment_type: str,
                       created_by_id: int, assigned_to_id: Optional[int] = None,
                       scheduled_vaccines: str = '', notes: str = '') -> Appointment:
    child = Child.objects.filter(id=child_id).first()
    if child is None:
        raise ResourceNotFound('Child', 'id', child_id)
    if child.is_deleted:
        raise BusinessRuleViolation('Cannot create appointment for deleted child')
    creator = _require_user(created_by_id)
    assignee = _require_user(assigned_to_id) if assigned_to_id is not None else None
    _require_future(appointment_date)

    appointment = Appointment.objects.create(
        child=child,
        appointment_date=appointment_date,
        appointment_type=appointment_type,
        status=Appointment.STATUS_SCHEDULED,
        scheduled_vaccines=scheduled_vaccines or '',
        assigned_to=assignee,
        notes=notes or '',
        created_by=creator,
    )
    notify_appointment_reminder(appointment)
    logger.info("appointment %s booked for child %s", appointment.id, child.id)
    return appointment


def get_appointment(appointment_id: int) -> Appointment:
    appointment = _qs().filter(id=appointment_id).first()
    if appointment is None:
        raise ResourceNotFound('Appointment', 'id', appointment_id)
    return appointment


def list_appointments() -> list[Appointment]:
    return list(_qs().order_by('-appointment_date', '-id'))


def appointments_for_child(child_id: int) -> list[Appointment]:
    child = get_child(child_id)
    return list(_qs().filter(child=child).order_by('-appointment_date', '-id'))


def appointments_for_user(user) -> list[Appointment]:
    """Parents see their children's appointments; staff their own workload."""
    qs = _qs()
    if user.role == User.ROLE_PARENT:
        child_ids = ChildGuardian.objects.filter(guardian__user=user).values('child_id')
        qs = qs.filter(child_id__in=child_ids, child__deleted_at__isnull=True)
    else:
        qs = qs.filter(Q(assigned_to=user) | Q(created_by=user))
    return list(qs.order_by('appointment_date', 'id'))


def appointments_by_status(status: str) -> list[Appointment]:
    if status not in dict(Appointment.STATUS_CHOICES):
        raise BusinessRuleViolation(f"Unknown appointment status: {status}")
    return list(_qs().filter(status=status).order_by('appointment_date', 'id'))


def upcoming_appointments() -> list[Appointment]:
    return list(
        _qs().filter(appointment_date__gte=timezone.now(), status__in=Appointment.OPEN_STATUSES)
        .order_by('appointment_date', 'id')
    )


def appointments_assigned_to(user_id: int) -> list[Appointment]:
    user = _require_user(user_id)
    return list(_qs().filter(assigned_to=user).order_by('appointment_date', 'id'))


def appointments_created_by(user_id: int) -> list[Appointment]:
    user = _require_user(user_id)
    return list(_qs().filter(created_by=user).order_by('appointment_date', 'id'))


def appointments_between(start: datetime.datetime, end: datetime.datetime) -> list[Appointment]:
    if start > end:
        raise BusinessRuleViolation('Start date must not be after end date')
    return list(_qs().filter(appointment_date__range=(start, end)).order_by('appointment_date', 'id'))


@transaction.atomic
def update_appointment(appointment_id: int, *, appointment_date: Optional[datetime.datetime] = None,
                       appointment_type: Optional[str] = None, assigned_to_id: Optional[int] = None,
                       scheduled_vaccines: Optional[str] = None, notes: Optional[str] = None) -> Appointment:
    appointment = get_appointment(appointment_id)
    moved = appointment_date is not None and appointment_date != appointment.appointment_date
    if moved:
        _require_future(appointment_date)
        appointment.appointment_date = appointment_date
    if appointment_type is not None:
        appointment.appointment_type = appointment_type
    if assigned_to_id is not None:
        appointment.assigned_to = _require_user(assigned_to_id)
    if scheduled_vaccines is not None:
        appointment.scheduled_vaccines = scheduled_vaccines
    if notes is not None:
        appointment.notes = notes
    appointment.save()
    if moved:
        notify_appointment_reminder(appointment)
    return appointment


@transaction.atomic
def set_status(appointment_id: int, status: str) -> Appointment:
    if status not in dict(Appointment.STATUS_CHOICES):
        raise BusinessRuleViolation(f"Unknown appointment status: {status}")
    appointment = get_appointment(appointment_id)
    previous = appointment.status
    appointment.status = status
    appointment.save(update_fields=['status', 'updated_at'])
    logger.info("appointment %s status %s -> %s", appointment.id, previous, status)
    return appointment


def confirm(appointment_id: int) -> Appointment:
    return set_status(appointment_id, Appointment.STATUS_CONFIRMED)


def complete(appointment_id: int) -> Appointment:
    return set_status(appointment_id, Appointment.STATUS_COMPLETED)


def cancel(appointment_id: int) -> Appointment:
    return set_status(appointment_id, Appointment.STATUS_CANCELLED)
