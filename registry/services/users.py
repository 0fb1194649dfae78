"""Account registration and role lookups."""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from registry.exceptions import DuplicateResource, ResourceNotFound

logger = logging.getLogger(__name__)

User = get_user_model()


def format_user(u) -> dict:
    return {
        'id': u.id,
        'username': u.username,
        'email': u.email,
        'firstName': u.first_name,
        'lastName': u.last_name,
        'fullName': u.get_full_name() or u.username,
        'role': u.role,
        'licenseNumber': u.license_number or None,
        'isActive': u.is_active,
        'lastLogin': u.last_login.isoformat() if u.last_login else None,
        'createdAt': u.date_joined.isoformat() if u.date_joined else None,
    }


def auth_payload(user) -> dict:
    """Token pair plus the profile fields the client keeps in session."""
    refresh = RefreshToken.for_user(user)
    return {
        'token': str(refresh.access_token),
        'refreshToken': str(refresh),
        'type': 'Bearer',
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'role': user.role,
    }


def record_login(user) -> None:
    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])


@transaction.atomic
def register_user(*, username: str, password: str, email: str, first_name: str, last_name: str,
                  role: str, license_number: str = ''):
    if User.objects.filter(username__iexact=username).exists():
        raise DuplicateResource('User', 'username', username)
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateResource('User', 'email', email)
    user = User.objects.create_user(
        username=username,
        password=password,
        email=email,
        first_name=first_name,
        last_name=last_name,
        role=role,
        license_number=license_number or '',
    )
    logger.info("user %s registered with role %s", user.id, role)
    return user


def get_user(user_id: int):
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise ResourceNotFound('User', 'id', user_id)
    return user


def list_users():
    return list(User.objects.order_by('last_name', 'first_name', 'id'))


def users_by_role(role: str, *, active_only: bool = False):
    qs = User.objects.filter(role=role)
    if active_only:
        qs = qs.filter(is_active=True)
    return list(qs.order_by('last_name', 'first_name', 'id'))


def doctors():
    return users_by_role(User.ROLE_DOCTOR, active_only=True)


def nurses():
    return users_by_role(User.ROLE_NURSE, active_only=True)


def medical_staff():
    return list(
        User.objects.filter(role__in=User.MEDICAL_ROLES, is_active=True).order_by('role', 'last_name', 'first_name', 'id')
    )
