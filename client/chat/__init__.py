"""
Chat module for client-side messaging functionality.

Handles:
- Connecting and registering
- Sending chat lines and commands
- Receiving server lines on a reader thread
"""
