"""
Shared constants for the MiniChat relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 8989
DEFAULT_BACKLOG = 50
ENCODING = 'utf-8'

# Outbound delivery
SEND_QUEUE_SIZE = 1024  # lines buffered per connection before it counts as stalled
CLOSE_TIMEOUT = 2.0  # seconds allowed to flush a connection on close

# Client timing
CONNECT_TIMEOUT = 10.0  # seconds
LEAVE_GRACE_PERIOD = 0.1  # seconds to let the server process "Bye"

# Time formats
CLOCK_FORMAT = '%H:%M:%S'
JOINED_AT_FORMAT = '%a %b %d %H:%M:%S %Z %Y'

# Server identity used in server-authored lines
SERVER_SENDER = 'Server'

# Registration
USERNAME_PREFIX = 'username = '
USERNAME_PATTERN = r'^username\s*=\s*(.*)$'


class Commands:
    """Reserved client-to-server lines."""
    LEAVE = 'Bye'
    ALL_USERS = 'AllUsers'


class Prompts:
    """Server-to-client corrective lines."""
    SET_USERNAME = 'Please set your username: username = <name>'
    USERNAME_TAKEN = 'Username already taken. Please choose another: username = <name>'
    USERNAME_EMPTY = 'Username cannot be empty. Please try again: username = <name>'
    ROSTER_HEADER = 'List of users connected at time: {time}'

    @classmethod
    def all(cls):
        return (cls.SET_USERNAME, cls.USERNAME_TAKEN, cls.USERNAME_EMPTY)
