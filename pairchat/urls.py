"""
URL configuration for the pairchat project.

The service is WebSocket-first; HTTP only serves the health check.
"""
from django.urls import path

from .health import health

urlpatterns = [
    # Health check endpoint for load balancer target groups
    path("health/", health),
]
