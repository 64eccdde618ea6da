"""
Chat module for server-side messaging functionality.

Handles:
- Session registration and removal
- Broadcast fan-out and reaping of dead connections
- The AllUsers roster
- Per-connection outbound delivery
"""
