"""
Client logging module.

This module handles client-side logging functionality. Chat lines themselves
are printed by the front ends; this logger carries diagnostics only.
"""

import logging
import sys


class ClientLogger:
    """Client logging class."""
    
    def __init__(self, log_level: int = logging.WARNING):
        self.logger = logging.getLogger('minichat_client')
        self.logger.setLevel(log_level)
        
        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
        
        # Diagnostics go to stderr so they never mix with the chat on stdout
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        
        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)
        
        # Add handler to logger
        self.logger.addHandler(console_handler)
    
    def set_level(self, log_level: int):
        """Change the level of the logger and its handlers."""
        self.logger.setLevel(log_level)
        for handler in self.logger.handlers:
            handler.setLevel(log_level)
    
    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)
    
    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)
    
    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)
    
    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)
    
    def log_connection(self, host: str, port: int, success: bool):
        """Log connection attempt."""
        status = "Connected" if success else "Failed to connect"
        self.info(f"{status} to {host}:{port}")
    
    def log_registration(self, username: str):
        """Log registration attempt."""
        self.info(f"Registering as '{username}'")
    
    def log_chat_sent(self, message: str):
        """Log chat line sent."""
        self.debug(f"Sent: {message}")
    
    def log_disconnect(self, reason: str):
        """Log loss of the server connection."""
        self.info(f"Disconnected: {reason}")
    
    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ClientLogger()
