"""
Bearer token authentication for the API.

A thin subclass of simplejwt's ``JWTAuthentication``.  Keeping it in its
own module gives settings a stable import path and lets the token checks
be extended without touching any view.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed


class BearerJWTAuthentication(JWTAuthentication):
    """Accepts ``Authorization: Bearer <access token>``.

    Tokens belonging to deactivated accounts are refused even while they
    are still within their lifetime.
    """

    keyword = 'Bearer'

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if not user.is_active:
            raise AuthenticationFailed('User account is disabled', code='user_inactive')
        return user
