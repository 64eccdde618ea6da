"""
Client package for the MiniChat relay.

This package contains all client-side functionality including:
- The line-protocol connection
- Terminal and desktop front ends
- Configuration and utilities
"""
