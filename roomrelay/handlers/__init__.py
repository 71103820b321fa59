"""Connection handling for the relay.

websocket/:
    The per-connection lifecycle handler:
    - Handshake rejection helpers (errors.py)
    - Inbound frame parsing and size limits (parser.py)
    - Outbound event construction (events.py)
    - Connection state machine (lifecycle.py)
    - Disconnect classification (disconnects.py)
    - Main connection handler (manager.py)
"""
