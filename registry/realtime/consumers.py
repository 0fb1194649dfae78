import json
from urllib.parse import parse_qs

from asgiref.sync import sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from registry.models import User
from registry.services.notifications import user_group


def _user_from_token(raw: str):
    try:
        token = AccessToken(raw)
    except TokenError:
        return None
    return User.objects.filter(id=token.get('user_id'), is_active=True).first()


class NotificationConsumer(AsyncWebsocketConsumer):
    """Pushes each new notification to its recipient's open sockets."""

    async def connect(self):
        user = self.scope.get("user") or AnonymousUser()
        if not user.is_authenticated:
            # Browsers cannot set headers on a WebSocket handshake
            query = parse_qs(self.scope.get("query_string", b"").decode())
            raw = (query.get("token") or [""])[0]
            user = await sync_to_async(_user_from_token)(raw) if raw else None
        if user is None or not user.is_authenticated:
            await self.close(code=4001)
            return

        self.group_name = user_group(user.id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def notification_created(self, event):
        # event: {"type": "notification.created", "notification": {...}}
        await self.send(json.dumps({"type": "notification", "data": event["notification"]}))
