from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from registry.permissions import IsMedicalStaff
from registry.serializers.children import GuardianSearchQuerySerializer, GuardianSerializer
from registry.services import guardians as svc
from registry.services.children import children_of_guardian, format_child


@api_view(['GET', 'POST'])
@permission_classes([IsMedicalStaff])
def guardians_collection(request):
    if request.method == 'GET':
        return Response([svc.format_guardian(g) for g in svc.list_guardians()])
    s = GuardianSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    guardian = svc.create_guardian(**s.validated_data)
    return Response(svc.format_guardian(svc.get_guardian(guardian.id)), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT'])
@permission_classes([IsMedicalStaff])
def guardian_detail(request, pk: int):
    if request.method == 'GET':
        return Response(svc.format_guardian(svc.get_guardian(pk)))
    s = GuardianSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    return Response(svc.format_guardian(svc.update_guardian(pk, **s.validated_data)))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def guardian_by_document(request, document_number: str):
    return Response(svc.format_guardian(svc.get_guardian_by_document(document_number)))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def search_guardians(request):
    q = GuardianSearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response([svc.format_guardian(g) for g in svc.search_guardians(q.validated_data['query'])])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def guardians_without_children(request):
    return Response([svc.format_guardian(g) for g in svc.guardians_without_children()])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def guardian_children(request, pk: int):
    return Response([format_child(c) for c in children_of_guardian(pk)])
