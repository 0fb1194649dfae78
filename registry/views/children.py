"""
Child registry views.

Doctors and nurses register and edit children, only doctors may delete
(soft delete), and parents can read records.  Soft-deleted children are
invisible to every endpoint here.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from registry.permissions import IsDoctor, IsMedicalStaff, IsRegisteredUser, require
from registry.serializers.children import ChildSearchQuerySerializer, ChildSerializer
from registry.serializers.common import DateRangeQuerySerializer
from registry.services import children as svc
from registry.services.guardians import format_guardian
from registry.services.plans import vaccination_status


@api_view(['GET', 'POST'])
@permission_classes([IsRegisteredUser])
def children_collection(request):
    if request.method == 'GET':
        return Response([svc.format_child(c) for c in svc.list_active_children()])
    require(request, IsMedicalStaff)
    s = ChildSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    child = svc.create_child(**s.validated_data)
    return Response(svc.format_child(child), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsRegisteredUser])
def child_detail(request, pk: int):
    if request.method == 'GET':
        return Response(svc.format_child(svc.get_child(pk)))
    if request.method == 'PUT':
        require(request, IsMedicalStaff)
        s = ChildSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        child = svc.update_child(pk, **s.validated_data)
        return Response(svc.format_child(child))
    # DELETE
    require(request, IsDoctor)
    svc.delete_child(pk, user=request.user)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def child_by_document(request, document_number: str):
    return Response(svc.format_child(svc.get_child_by_document(document_number)))


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def search_children(request):
    q = ChildSearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response([svc.format_child(c) for c in svc.search_children(q.validated_data['query'])])


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def children_by_guardian(request, guardian_id: int):
    return Response([svc.format_child(c) for c in svc.children_of_guardian(guardian_id)])


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def my_children(request):
    """Children linked to the caller through their guardian profiles."""
    return Response([svc.format_child(c) for c in svc.children_of_user(request.user)])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def children_without_guardians(request):
    return Response([svc.format_child(c) for c in svc.children_without_guardians()])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def children_born_between(request):
    q = DateRangeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    found = svc.children_born_between(q.validated_data['startDate'], q.validated_data['endDate'])
    return Response([svc.format_child(c) for c in found])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def child_guardians(request, pk: int):
    return Response([format_guardian(g) for g in svc.guardians_of_child(pk)])


@api_view(['POST', 'DELETE'])
@permission_classes([IsMedicalStaff])
def child_guardian_link(request, pk: int, guardian_id: int):
    if request.method == 'POST':
        child = svc.link_guardian(pk, guardian_id)
        return Response(svc.format_child(child), status=status.HTTP_201_CREATED)
    svc.unlink_guardian(pk, guardian_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsRegisteredUser])
def child_vaccination_status(request, pk: int):
    return Response(vaccination_status(pk))
