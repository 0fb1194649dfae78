from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from registry.models import User
from registry.permissions import IsDoctor, IsMedicalStaff
from registry.services import users as svc


def _many(users) -> Response:
    return Response([svc.format_user(u) for u in users])


@api_view(['GET'])
@permission_classes([IsDoctor])
def users_list(request):
    return _many(svc.list_users())


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def user_detail(request, pk: int):
    return Response(svc.format_user(svc.get_user(pk)))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def users_by_role(request, role: str):
    role = role.upper()
    if role not in dict(User.ROLE_CHOICES):
        raise ValidationError({'role': f"Unknown role: {role}"})
    active_only = (request.query_params.get('activeOnly') or '0') in ['1', 'true', 'True']
    return _many(svc.users_by_role(role, active_only=active_only))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def medical_staff(request):
    return _many(svc.medical_staff())


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def doctors(request):
    return _many(svc.doctors())


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def nurses(request):
    return _many(svc.nurses())
