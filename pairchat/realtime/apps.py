"""
Django app configuration for the realtime app.
"""

import logging
from django.apps import AppConfig

logger = logging.getLogger(__name__)


class RealtimeConfig(AppConfig):
    """App configuration for the pairing/relay WebSocket app."""

    name = "pairchat.realtime"
    label = "realtime"

    def ready(self):
        """Log the effective lobby limits once on startup."""
        from pairchat.config import config

        logger.info(
            "Lobby limits: max_frame_bytes=%s max_name_length=%s max_avatar_length=%s",
            config.MAX_FRAME_BYTES,
            config.MAX_NAME_LENGTH,
            config.MAX_AVATAR_LENGTH,
        )
