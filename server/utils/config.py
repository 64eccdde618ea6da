"""
Server configuration module.

This module handles server-side configuration settings.
"""

import logging

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, DEFAULT_BACKLOG, SEND_QUEUE_SIZE, CLOSE_TIMEOUT
)


class ServerConfig:
    """Server configuration class."""
    
    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 backlog: int = DEFAULT_BACKLOG, log_level: int = logging.INFO):
        self.host = host
        self.port = port
        self.backlog = backlog
        self.log_level = log_level
        
        # Outbound delivery settings
        self.send_queue_size = SEND_QUEUE_SIZE
        self.close_timeout = CLOSE_TIMEOUT
