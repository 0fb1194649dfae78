"""
Authentication views.

Login and registration are public and hand back a JWT pair; refresh
rotates the pair and logout blacklists refresh tokens.  These live apart
from ``registry.authentication`` so that DRF can import the
authentication class at start-up without pulling in any view code.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from registry.serializers.auth import LoginSerializer, LogoutSerializer, RefreshSerializer, RegisterSerializer
from registry.services.audit import LOGIN, log_action
from registry.services.users import auth_payload, format_user, record_login, register_user
from registry.throttling import LoginRateThrottle

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle, LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']

    user = authenticate(request, username=username, password=s.validated_data['password'])
    if not user:
        log_action(user=None, action=LOGIN, object_type='user',
                   detail={'result': 'fail', 'username': username, 'ip': request.META.get('REMOTE_ADDR')})
        raise AuthenticationFailed('Invalid username or password')

    record_login(user)
    log_action(user=user, action=LOGIN, object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    return Response(auth_payload(user))


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle, LoginRateThrottle])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = register_user(**s.validated_data)
    return Response(auth_payload(user), status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def refresh_view(request):
    s = RefreshSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    inner = TokenRefreshSerializer(data={'refresh': s.validated_data['refreshToken']})
    try:
        inner.is_valid(raise_exception=True)
    except TokenError as e:
        raise InvalidToken(e.args[0])
    data = inner.validated_data
    return Response({
        'token': data['access'],
        'refreshToken': data.get('refresh', s.validated_data['refreshToken']),
        'type': 'Bearer',
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Blacklist one refresh token, or every outstanding one of the caller."""
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    token = s.validated_data.get('refreshToken')
    count = 0
    if token:
        try:
            refresh = RefreshToken(token)
        except TokenError as e:
            raise InvalidToken(e.args[0])
        if str(refresh.payload.get('user_id')) != str(request.user.id):
            raise InvalidToken('Token does not belong to the current user')
        refresh.blacklist()
        count = 1
    else:
        for outstanding in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=outstanding)
            count += int(created)
    logger.info("user %s logged out (%d tokens revoked)", request.user.id, count)
    return Response({'blacklisted': count})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response(format_user(request.user))
