"""
Child registration and guardian links.

Deleted children keep their row with ``deleted_at`` set and are filtered
out of every lookup here.
"""
import datetime
import logging
from typing import Optional

from django.db import transaction
from django.db.models import Count, Q, QuerySet

from registry.exceptions import BusinessRuleViolation, DuplicateResource, ResourceNotFound
from registry.models import Child, ChildGuardian, Guardian
from registry.services.audit import CHILD_DELETED, log_action

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'first_name', 'last_name', 'document_number', 'date_of_birth', 'gender',
    'blood_type', 'birth_weight', 'birth_height',
)


def _active() -> QuerySet:
    return Child.objects.active().annotate(guardian_count=Count('guardian_links'))


def format_child(child: Child) -> dict:
    guardian_count = getattr(child, 'guardian_count', None)
    if guardian_count is None:
        guardian_count = child.guardian_links.count()
    return {
        'id': child.id,
        'firstName': child.first_name,
        'lastName': child.last_name,
        'fullName': child.full_name,
        'documentNumber': child.document_number,
        'dateOfBirth': child.date_of_birth.isoformat(),
        'ageInMonths': child.age_in_months(),
        'gender': child.gender,
        'bloodType': child.blood_type or None,
        'birthWeight': str(child.birth_weight) if child.birth_weight is not None else None,
        'birthHeight': str(child.birth_height) if child.birth_height is not None else None,
        'guardianCount': guardian_count,
        'createdAt': child.created_at.isoformat() if child.created_at else None,
        'updatedAt': child.updated_at.isoformat() if child.updated_at else None,
    }


@transaction.atomic
def create_child(**fields) -> Child:
    document = fields['document_number']
    if Child.objects.filter(document_number=document).exists():
        raise DuplicateResource('Child', 'document number', document)
    child = Child.objects.create(**{k: v for k, v in fields.items() if k in EDITABLE_FIELDS})
    logger.info("child %s registered", child.id)
    return child


def get_child(child_id: int) -> Child:
    child = _active().filter(id=child_id).first()
    if child is None:
        raise ResourceNotFound('Child', 'id', child_id)
    return child


def get_child_by_document(document_number: str) -> Child:
    child = _active().filter(document_number=document_number).first()
    if child is None:
        raise ResourceNotFound('Child', 'document number', document_number)
    return child


def list_active_children() -> list[Child]:
    return list(_active().order_by('last_name', 'first_name', 'id'))


def search_children(query: str) -> list[Child]:
    query = query.strip()
    return list(
        _active().filter(Q(first_name__icontains=query) | Q(last_name__icontains=query))
        .order_by('last_name', 'first_name', 'id')
    )


def children_of_guardian(guardian_id: int) -> list[Child]:
    if not Guardian.objects.filter(id=guardian_id).exists():
        raise ResourceNotFound('Guardian', 'id', guardian_id)
    return list(_active().filter(guardian_links__guardian_id=guardian_id).order_by('last_name', 'first_name', 'id'))


def children_of_user(user) -> list[Child]:
    """Children reachable from the guardian profiles linked to ``user``."""
    child_ids = ChildGuardian.objects.filter(guardian__user=user).values('child_id')
    return list(_active().filter(id__in=child_ids).order_by('last_name', 'first_name', 'id'))


def children_without_guardians() -> list[Child]:
    return list(_active().filter(guardian_count=0).order_by('created_at', 'id'))


def children_born_between(start: datetime.date, end: datetime.date) -> list[Child]:
    if start > end:
        raise BusinessRuleViolation('Start date must not be after end date')
    return list(_active().filter(date_of_birth__range=(start, end)).order_by('date_of_birth', 'id'))


@transaction.atomic
def update_child(child_id: int, **fields) -> Child:
    child = get_child(child_id)
    document = fields.get('document_number')
    if document and document != child.document_number:
        if Child.objects.filter(document_number=document).exclude(id=child.id).exists():
            raise DuplicateResource('Child', 'document number', document)
    for name, value in fields.items():
        if name in EDITABLE_FIELDS:
            setattr(child, name, value)
    child.save()
    return child


@transaction.atomic
def delete_child(child_id: int, *, user=None) -> None:
    child = Child.objects.select_for_update().filter(id=child_id).first()
    if child is None or child.is_deleted:
        raise ResourceNotFound('Child', 'id', child_id)
    child.soft_delete()
    child.save(update_fields=['deleted_at', 'updated_at'])
    log_action(user=user, action=CHILD_DELETED, object_type='child', object_id=child.id,
               detail={'documentNumber': child.document_number})
    logger.info("child %s soft-deleted", child.id)


def guardians_of_child(child_id: int) -> list[Guardian]:
    child = get_child(child_id)
    return list(
        Guardian.objects.filter(child_links__child=child)
        .annotate(child_count=Count('child_links', filter=Q(child_links__child__deleted_at__isnull=True)))
        .order_by('last_name', 'first_name', 'id')
    )


@transaction.atomic
def link_guardian(child_id: int, guardian_id: int) -> Child:
    child = get_child(child_id)
    guardian = Guardian.objects.filter(id=guardian_id).first()
    if guardian is None:
        raise ResourceNotFound('Guardian', 'id', guardian_id)
    _, created = ChildGuardian.objects.get_or_create(child=child, guardian=guardian)
    if not created:
        raise DuplicateResource('Guardian link', 'guardian id', guardian_id)
    return get_child(child.id)


@transaction.atomic
def unlink_guardian(child_id: int, guardian_id: int) -> None:
    child = get_child(child_id)
    deleted, _ = ChildGuardian.objects.filter(child=child, guardian_id=guardian_id).delete()
    if not deleted:
        raise ResourceNotFound('Guardian link', 'guardian id', guardian_id)


def child_age_in_months(child_id: int, on: Optional[datetime.date] = None) -> int:
    return get_child(child_id).age_in_months(on)
