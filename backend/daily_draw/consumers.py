# daily_draw/consumers.py
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .services import GROUP_NAME


class DailyDrawConsumer(AsyncJsonWebsocketConsumer):
    """Read-only feed: pot changes and the winner announcement."""

    async def connect(self):
        user = self.scope.get("user")
        if user is None or user.is_anonymous:
            await self.close()
            return

        await self.channel_layer.group_add(GROUP_NAME, self.channel_name)
        await self.accept()
        await self.send_json({"event": "connected"})

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(GROUP_NAME, self.channel_name)

    async def draw_pot(self, event):
        await self.send_json({"event": "pot", "data": event["data"]})

    async def draw_winner(self, event):
        await self.send_json({"event": "winner", "data": event["data"]})
