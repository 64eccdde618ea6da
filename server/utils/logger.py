"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging


class ServerLogger:
    """Server logging class."""
    
    def __init__(self, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('minichat_server')
        self.logger.setLevel(log_level)
        
        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
        
        # Create console handler
        console_handler = logging.StreamHandler()
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
    
    def log_listening(self, host: str, port: int):
        """Log server start."""
        self.info(f"Server started on {host}:{port}")
    
    def log_connection(self, addr: tuple):
        """Log client connection."""
        self.info(f"New connection from {addr}")
    
    def log_login(self, username: str, addr: tuple):
        """Log user registration."""
        self.info(f"Welcome {username} ({addr})")
    
    def log_login_rejected(self, username: str, addr: tuple):
        """Log a registration attempt for a name already in use."""
        self.info(f"Username '{username}' already taken, rejected {addr}")
    
    def log_chat(self, username: str, message: str):
        """Log chat message."""
        self.info(f"{username}: {message}")
    
    def log_user_list(self, username: str, count: int):
        """Log roster request."""
        self.info(f"{username} requested the user list ({count} users)")
    
    def log_leave(self, username: str):
        """Log an explicit Bye."""
        self.info(f"{username} disconnected with a Bye message.")
    
    def log_disconnect(self, username: str):
        """Log user disconnect."""
        self.info(f"Server: Goodbye {username}")
    
    def log_reaped(self, username: str):
        """Log a session removed after a failed delivery."""
        self.warning(f"Removed failed user: {username}")
    
    def log_delivery_failure(self, username: str, error: Exception):
        """Log a failed delivery to one session."""
        self.warning(f"Failed to deliver to {username}: {error}")
    
    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ServerLogger()
