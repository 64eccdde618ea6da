"""
Server package for the MiniChat relay.

This package contains all server-side functionality including:
- The listener that accepts connections
- Per-connection registration and chat handling
- The shared session registry and broadcast
- Configuration and utilities
"""
