from __future__ import annotations

import os
import time

from django.http import JsonResponse

from pairchat.realtime.lobby import lobby


def health(request):
    """
    Load balancer health check endpoint.

    Keep it cheap and dependency-free: no Redis call, only an in-memory
    snapshot of the lobby.
    """

    stats = lobby.stats()
    return JsonResponse(
        {
            "status": "ok",
            "ts": int(time.time()),
            "instance_id": os.environ.get("INSTANCE_ID", "unknown-instance"),
            "lobby": {
                "profiles": stats.profiles,
                "waiting": stats.waiting,
                "sessions": stats.sessions,
            },
        }
    )
