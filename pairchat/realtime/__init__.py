"""
Realtime WebSocket app.

This app contains:
- The matchmaking core (registry, waiting queue, session store, pairing,
  relay authorization, disconnect reconciliation) behind a single `Lobby`
- A Channels consumer for `/ws/pair/`
- All state is in memory and per process (use sticky sessions behind a load balancer)
"""
