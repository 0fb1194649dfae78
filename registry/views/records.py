from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from registry.permissions import IsMedicalStaff, IsRegisteredUser
from registry.serializers.common import DateRangeQuerySerializer
from registry.serializers.records import (
    EligibilityQuerySerializer,
    UpcomingQuerySerializer,
    VaccinationRecordSerializer,
)
from registry.services import plans
from registry.services import records as svc


@api_view(['POST'])
@permission_classes([IsMedicalStaff])
def create_record(request):
    """Record an administered dose; the administering user is the caller."""
    s = VaccinationRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = svc.create_record(administered_by_id=request.user.id, **s.validated_data)
    return Response(svc.format_record(svc.get_record(record.id)), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def record_detail(request, pk: int):
    return Response(svc.format_record(svc.get_record(pk)))


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def records_for_child(request, child_id: int):
    return Response([svc.format_record(r) for r in svc.records_for_child(child_id)])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def records_for_vaccine(request, vaccine_id: int):
    return Response([svc.format_record(r) for r in svc.records_for_vaccine(vaccine_id)])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def records_for_batch(request, batch_number: str):
    return Response([svc.format_record(r) for r in svc.records_for_batch(batch_number)])


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def upcoming_doses(request):
    q = UpcomingQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response([svc.format_record(r) for r in svc.upcoming_doses(q.validated_data['daysAhead'])])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def eligibility(request):
    q = EligibilityQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response(plans.check_eligibility(q.validated_data['childId'], q.validated_data['vaccineId']))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def coverage(request):
    q = DateRangeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response(plans.coverage(q.validated_data['startDate'], q.validated_data['endDate']))
