"""
Vaccine catalogue and national schedule views.

Reading is open to every signed-in user; only doctors maintain the
catalogue.  The active catalogue and per-country schedules are served
from cache and invalidated whenever a vaccine changes.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from registry.permissions import IsDoctor, require
from registry.serializers.vaccines import DiseaseQuerySerializer, MandatoryQuerySerializer, VaccineSerializer
from registry.services import schedules
from registry.services import vaccines as svc


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def vaccines_collection(request):
    if request.method == 'GET':
        return Response(svc.active_vaccines_payload())
    require(request, IsDoctor)
    s = VaccineSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vaccine = svc.create_vaccine(**s.validated_data)
    return Response(svc.format_vaccine(vaccine), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def all_vaccines(request):
    return Response([svc.format_vaccine(v) for v in svc.list_all_vaccines()])


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def vaccine_detail(request, pk: int):
    if request.method == 'GET':
        return Response(svc.format_vaccine(svc.get_vaccine(pk)))
    require(request, IsDoctor)
    s = VaccineSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    return Response(svc.format_vaccine(svc.update_vaccine(pk, **s.validated_data)))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def vaccine_by_name(request, name: str):
    return Response(svc.format_vaccine(svc.get_vaccine_by_name(name)))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def search_vaccines(request):
    q = DiseaseQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response([svc.format_vaccine(v) for v in svc.search_by_disease(q.validated_data['disease'])])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def schedules_list(request):
    return Response([schedules.format_schedule(s) for s in schedules.all_schedules()])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def schedules_for_country(request, country_code: str):
    return Response(schedules.country_schedule_payload(country_code))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def paraguay_schedule(request):
    return Response(schedules.paraguay_schedule_payload())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def schedules_for_vaccine(request, vaccine_id: int):
    return Response([schedules.format_schedule(s) for s in schedules.schedules_for_vaccine(vaccine_id)])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def mandatory_schedules(request):
    q = MandatoryQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    found = schedules.mandatory_up_to_age(q.validated_data['ageMonths'], q.validated_data.get('country'))
    return Response([schedules.format_schedule(s) for s in found])
