"""Guardian profiles. ``childCount`` counts live children only."""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q, QuerySet

from registry.exceptions import DuplicateResource, ResourceNotFound
from registry.models import Guardian

logger = logging.getLogger(__name__)

User = get_user_model()

EDITABLE_FIELDS = (
    'first_name', 'last_name', 'document_number', 'phone', 'email', 'address', 'relationship',
)


def _with_counts() -> QuerySet:
    # Soft-deleted children do not count as wards
    return Guardian.objects.annotate(
        child_count=Count('child_links', filter=Q(child_links__child__deleted_at__isnull=True))
    )


def format_guardian(g: Guardian) -> dict:
    child_count = getattr(g, 'child_count', None)
    if child_count is None:
        child_count = g.child_links.filter(child__deleted_at__isnull=True).count()
    return {
        'id': g.id,
        'userId': g.user_id,
        'firstName': g.first_name,
        'lastName': g.last_name,
        'fullName': g.full_name,
        'documentNumber': g.document_number,
        'phone': g.phone,
        'email': g.email or None,
        'address': g.address or None,
        'relationship': g.relationship,
        'childCount': child_count,
        'createdAt': g.created_at.isoformat() if g.created_at else None,
    }


def _resolve_user(user_id):
    if user_id is None:
        return None
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise ResourceNotFound('User', 'id', user_id)
    return user


@transaction.atomic
def create_guardian(*, user_id=None, **fields) -> Guardian:
    document = fields['document_number']
    if Guardian.objects.filter(document_number=document).exists():
        raise DuplicateResource('Guardian', 'document number', document)
    guardian = Guardian.objects.create(
        user=_resolve_user(user_id),
        **{k: v for k, v in fields.items() if k in EDITABLE_FIELDS},
    )
    logger.info("guardian %s registered", guardian.id)
    return guardian


def get_guardian(guardian_id: int) -> Guardian:
    guardian = _with_counts().filter(id=guardian_id).first()
    if guardian is None:
        raise ResourceNotFound('Guardian', 'id', guardian_id)
    return guardian


def get_guardian_by_document(document_number: str) -> Guardian:
    guardian = _with_counts().filter(document_number=document_number).first()
    if guardian is None:
        raise ResourceNotFound('Guardian', 'document number', document_number)
    return guardian


def list_guardians() -> list[Guardian]:
    return list(_with_counts().order_by('last_name', 'first_name', 'id'))


def search_guardians(query: str) -> list[Guardian]:
    query = query.strip()
    return list(
        _with_counts().filter(Q(first_name__icontains=query) | Q(last_name__icontains=query))
        .order_by('last_name', 'first_name', 'id')
    )


def guardians_without_children() -> list[Guardian]:
    return list(_with_counts().filter(child_count=0).order_by('created_at', 'id'))


@transaction.atomic
def update_guardian(guardian_id: int, *, user_id=None, **fields) -> Guardian:
    guardian = get_guardian(guardian_id)
    document = fields.get('document_number')
    if document and document != guardian.document_number:
        if Guardian.objects.filter(document_number=document).exclude(id=guardian.id).exists():
            raise DuplicateResource('Guardian', 'document number', document)
    for name, value in fields.items():
        if name in EDITABLE_FIELDS:
            setattr(guardian, name, value)
    if user_id is not None:
        guardian.user = _resolve_user(user_id)
    guardian.save()
    return get_guardian(guardian.id)
