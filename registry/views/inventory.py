"""
Vaccine inventory views.

Doctors and nurses only.  Quantity edits are expressed as the new absolute
quantity; the service applies the difference so the DEPLETED/AVAILABLE
status follows automatically.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from registry.permissions import IsMedicalStaff
from registry.serializers.inventory import (
    ExpiringQuerySerializer,
    InventoryBatchSerializer,
    LowStockQuerySerializer,
    QuantityUpdateSerializer,
    StatusUpdateSerializer,
)
from registry.services import inventory as svc


@api_view(['GET', 'POST'])
@permission_classes([IsMedicalStaff])
def inventory_collection(request):
    if request.method == 'GET':
        return Response([svc.format_batch(b) for b in svc.list_batches()])
    s = InventoryBatchSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    batch = svc.add_batch(received_by_id=request.user.id, **s.validated_data)
    return Response(svc.format_batch(batch), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def batch_detail(request, pk: int):
    return Response(svc.format_batch(svc.get_batch(pk)))


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def available_for_vaccine(request, vaccine_id: int):
    return Response([svc.format_batch(b) for b in svc.available_for_vaccine(vaccine_id)])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def total_for_vaccine(request, vaccine_id: int):
    return Response({'vaccineId': vaccine_id, 'totalAvailable': svc.total_available(vaccine_id)})


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def expiring(request):
    q = ExpiringQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response([svc.format_batch(b) for b in svc.expiring_within(q.validated_data.get('days'))])


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def low_stock(request):
    q = LowStockQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response([svc.format_batch(b) for b in svc.low_stock(q.validated_data.get('threshold'))])


@api_view(['PUT'])
@permission_classes([IsMedicalStaff])
def update_quantity(request, pk: int):
    s = QuantityUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    batch = svc.set_quantity(pk, s.validated_data['quantity'], user=request.user)
    return Response(svc.format_batch(batch))


@api_view(['PUT'])
@permission_classes([IsMedicalStaff])
def update_status(request, pk: int):
    s = StatusUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    batch = svc.set_status(pk, s.validated_data['status'], user=request.user)
    return Response(svc.format_batch(batch))
