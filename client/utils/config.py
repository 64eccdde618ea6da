"""
Client configuration module.

This module handles client-side configuration settings.
"""

from common.constants import DEFAULT_HOST, DEFAULT_PORT, CONNECT_TIMEOUT, LEAVE_GRACE_PERIOD


class ClientConfig:
    """Client configuration class."""
    
    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, username: str = None):
        self.host = host
        self.port = port
        self.username = username
        
        # Connection settings
        self.connect_timeout = CONNECT_TIMEOUT
        self.leave_grace_period = LEAVE_GRACE_PERIOD
