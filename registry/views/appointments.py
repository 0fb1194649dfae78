"""
Appointment views.

Anyone with an account may book, confirm or cancel; completing, listing
the whole calendar and arbitrary status changes are for medical staff.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from registry.permissions import IsMedicalStaff, IsRegisteredUser, require
from registry.serializers.appointments import (
    AppointmentSerializer,
    AppointmentStatusSerializer,
    AppointmentUpdateSerializer,
)
from registry.serializers.common import DateTimeRangeQuerySerializer
from registry.services import appointments as svc


def _many(items) -> Response:
    return Response([svc.format_appointment(a) for a in items])


@api_view(['GET', 'POST'])
@permission_classes([IsRegisteredUser])
def appointments_collection(request):
    if request.method == 'GET':
        require(request, IsMedicalStaff)
        return _many(svc.list_appointments())
    s = AppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = svc.create_appointment(created_by_id=request.user.id, **s.validated_data)
    return Response(svc.format_appointment(appointment), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT'])
@permission_classes([IsRegisteredUser])
def appointment_detail(request, pk: int):
    if request.method == 'GET':
        return Response(svc.format_appointment(svc.get_appointment(pk)))
    require(request, IsMedicalStaff)
    s = AppointmentUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(svc.format_appointment(svc.update_appointment(pk, **s.validated_data)))


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def appointments_for_child(request, child_id: int):
    return _many(svc.appointments_for_child(child_id))


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def my_appointments(request):
    return _many(svc.appointments_for_user(request.user))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def upcoming(request):
    return _many(svc.upcoming_appointments())


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def by_status(request, status_value: str):
    return _many(svc.appointments_by_status(status_value.upper()))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def assigned_to(request, user_id: int):
    return _many(svc.appointments_assigned_to(user_id))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def created_by(request, user_id: int):
    return _many(svc.appointments_created_by(user_id))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def in_range(request):
    q = DateTimeRangeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return _many(svc.appointments_between(q.validated_data['start'], q.validated_data['end']))


@api_view(['PUT'])
@permission_classes([IsMedicalStaff])
def update_status(request, pk: int):
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(svc.format_appointment(svc.set_status(pk, s.validated_data['status'])))


@api_view(['PUT'])
@permission_classes([IsRegisteredUser])
def confirm(request, pk: int):
    return Response(svc.format_appointment(svc.confirm(pk)))


@api_view(['PUT'])
@permission_classes([IsMedicalStaff])
def complete(request, pk: int):
    return Response(svc.format_appointment(svc.complete(pk)))


@api_view(['PUT'])
@permission_classes([IsRegisteredUser])
def cancel(request, pk: int):
    return Response(svc.format_appointment(svc.cancel(pk)))
