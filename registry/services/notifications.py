"""
Notification generation, delivery and read tracking.

Notifications are rows addressed to a user or a guardian.  Services call
the ``notify_*`` helpers after their own writes; user notifications are
also pushed to ``notifications.<user id>`` on the channel layer once the
surrounding transaction commits.
"""
from __future__ import annotations

import datetime
import logging
from typing import Iterable

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from registry.exceptions import ResourceNotFound
from registry.models import Appointment, Notification, VaccineInventory

logger = logging.getLogger(__name__)

User = get_user_model()


def user_group(user_id: int) -> str:
    return f"notifications.{user_id}"


def format_notification(n: Notification) -> dict:
    return {
        'id': n.id,
        'recipientId': n.recipient_id,
        'recipientType': n.recipient_type,
        'type': n.notification_type,
        'title': n.title,
        'message': n.message,
        'referenceId': n.reference_id,
        'referenceType': n.reference_type or None,
        'isRead': n.is_read,
        'sentAt': n.sent_at.isoformat() if n.sent_at else None,
        'readAt': n.read_at.isoformat() if n.read_at else None,
    }


def _push(notification: Notification) -> None:
    if notification.recipient_type != Notification.RECIPIENT_USER:
        return
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    payload = {'type': 'notification.created', 'notification': format_notification(notification)}

    def send():
        try:
            async_to_sync(channel_layer.group_send)(user_group(notification.recipient_id), payload)
        except Exception:
            # Delivery is best effort; the row is already stored
            logger.warning("push failed for notification %s", notification.id, exc_info=True)

    transaction.on_commit(send)


def notify(*, recipient_id: int, title: str, message: str,
           notification_type: str = Notification.TYPE_INFO,
           recipient_type: str = Notification.RECIPIENT_USER,
           reference_id: int | None = None, reference_type: str = '') -> Notification:
    n = Notification.objects.create(
        recipient_id=recipient_id,
        recipient_type=recipient_type,
        notification_type=notification_type,
        title=title,
        message=message,
        reference_id=reference_id,
        reference_type=reference_type,
    )
    _push(n)
    return n


def _medical_staff() -> Iterable[User]:
    return User.objects.filter(role__in=User.MEDICAL_ROLES, is_active=True).order_by('id')


def notify_appointment_reminder(appointment: Appointment, *, now: datetime.datetime | None = None) -> Notification | None:
    """Remind the creator of an open appointment falling inside the reminder window."""
    now = now or timezone.now()
    if appointment.status not in Appointment.OPEN_STATUSES:
        return None
    days_until = (timezone.localdate(appointment.appointment_date) - timezone.localdate(now)).days
    if not 0 <= days_until <= settings.APPOINTMENT_REMINDER_DAYS:
        return None
    child = appointment.child
    when = timezone.localtime(appointment.appointment_date).strftime('%Y-%m-%d %H:%M')
    return notify(
        recipient_id=appointment.created_by_id,
        notification_type=Notification.TYPE_REMINDER,
        title='Appointment reminder',
        message=f"{appointment.appointment_type} appointment for {child.full_name} on {when}.",
        reference_id=appointment.id,
        reference_type='APPOINTMENT',
    )


def notify_inventory_alerts(batch: VaccineInventory, *, previous_quantity: int | None = None) -> list[Notification]:
    """Warn medical staff about a batch running low or about to expire.

    Low stock fires only when the batch crosses the threshold, so repeated
    deductions from an already low batch do not flood inboxes.
    """
    created: list[Notification] = []
    if batch.status != VaccineInventory.STATUS_AVAILABLE:
        return created
    threshold = settings.LOW_STOCK_THRESHOLD
    vaccine_name = batch.vaccine.name
    staff = list(_medical_staff())

    crossed = previous_quantity is None or previous_quantity >= threshold
    if batch.quantity < threshold and crossed:
        for user in staff:
            created.append(notify(
                recipient_id=user.id,
                notification_type=Notification.TYPE_WARNING,
                title='Low vaccine stock',
                message=f"Batch {batch.batch_number} of {vaccine_name} has {batch.quantity} doses left.",
                reference_id=batch.id,
                reference_type='INVENTORY',
            ))

    if previous_quantity is None:
        days_left = (batch.expiration_date - timezone.localdate()).days
        if 0 <= days_left <= settings.EXPIRATION_WARNING_DAYS:
            for user in staff:
                created.append(notify(
                    recipient_id=user.id,
                    notification_type=Notification.TYPE_ALERT,
                    title='Vaccine batch expiring soon',
                    message=f"Batch {batch.batch_number} of {vaccine_name} expires on {batch.expiration_date.isoformat()}.",
                    reference_id=batch.id,
                    reference_type='INVENTORY',
                ))
    if created:
        logger.info("inventory alerts for batch %s: %d notifications", batch.id, len(created))
    return created


def list_for_user(user, *, unread_only: bool = False) -> list[Notification]:
    qs = Notification.objects.filter(recipient_type=Notification.RECIPIENT_USER, recipient_id=user.id)
    if unread_only:
        qs = qs.filter(is_read=False)
    return list(qs.order_by('-sent_at', '-id'))


def unread_count(user) -> int:
    return Notification.objects.filter(
        recipient_type=Notification.RECIPIENT_USER, recipient_id=user.id, is_read=False
    ).count()


@transaction.atomic
def mark_read(user, notification_id: int) -> Notification:
    n = Notification.objects.filter(
        id=notification_id, recipient_type=Notification.RECIPIENT_USER, recipient_id=user.id
    ).first()
    if n is None:
        raise ResourceNotFound('Notification', 'id', notification_id)
    if not n.is_read:
        n.mark_as_read()
        n.save(update_fields=['is_read', 'read_at'])
    return n


@transaction.atomic
def mark_all_read(user) -> int:
    return Notification.objects.filter(
        recipient_type=Notification.RECIPIENT_USER, recipient_id=user.id, is_read=False
    ).update(is_read=True, read_at=timezone.now())
