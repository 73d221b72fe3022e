from django.urls import re_path

from .consumers import PairChatConsumer


websocket_urlpatterns = [
    re_path(r"^ws/pair/$", PairChatConsumer.as_asgi()),
]
