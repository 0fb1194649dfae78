from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from registry.permissions import IsDoctor
from registry.services.audit import format_audit_event, history_for


@api_view(['GET'])
@permission_classes([IsDoctor])
def object_history(request, object_type: str, object_id: int):
    return Response([format_audit_event(e) for e in history_for(object_type, object_id)])
