from django.urls import path
from .consumers import DailyDrawConsumer

websocket_urlpatterns = [
    path("ws/daily-draw/", DailyDrawConsumer.as_asgi()),
]
