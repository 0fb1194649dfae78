"""Audit trail writes and per-object history."""
from typing import Optional, Any, Dict
from django.contrib.auth import get_user_model
from registry.models import AuditEvent

User = get_user_model()

# Actions written to the audit trail
CHILD_DELETED = 'child_deleted'
VACCINATION_RECORDED = 'vaccination_recorded'
INVENTORY_ADDED = 'inventory_added'
INVENTORY_QUANTITY_CHANGED = 'inventory_quantity_changed'
INVENTORY_STATUS_CHANGED = 'inventory_status_changed'
LOGIN = 'login'


def log_action(*, user: Optional[User], action: str, object_type: Optional[str]=None, object_id: Optional[int]=None, detail: Optional[Dict[str, Any]]=None) -> AuditEvent:
    return AuditEvent.objects.create(
        user=user if getattr(user, 'pk', None) else None,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
    )


def history_for(object_type: str, object_id: int) -> list[AuditEvent]:
    return list(
        AuditEvent.objects.filter(object_type=object_type, object_id=object_id)
        .select_related('user').order_by('-created_at', '-id')
    )


def format_audit_event(event: AuditEvent) -> dict:
    return {
        'id': event.id,
        'action': event.action,
        'userId': event.user_id,
        'objectType': event.object_type,
        'objectId': event.object_id,
        'detail': event.detail,
        'createdAt': event.created_at.isoformat(),
    }
