from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from registry.services import notifications as svc


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_notifications(request):
    return Response([svc.format_notification(n) for n in svc.list_for_user(request.user)])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def unread_notifications(request):
    return Response([svc.format_notification(n) for n in svc.list_for_user(request.user, unread_only=True)])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def unread_count(request):
    return Response({'unread': svc.unread_count(request.user)})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def mark_read(request, pk: int):
    return Response(svc.format_notification(svc.mark_read(request.user, pk)))


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def mark_all_read(request):
    return Response({'updated': svc.mark_all_read(request.user)})
