"""
Chat client module.

This module handles the client side of the line protocol. Both the terminal
and the desktop front ends drive one ChatClient: it owns the socket, writes
lines, and runs a reader thread that hands every received line to a handler.
"""

import socket
import threading
from typing import Callable, Optional

from common.constants import ENCODING, Commands
from common.protocol_definitions import create_username_line
from client.utils.config import ClientConfig
from client.utils.logger import logger


class ChatClient:
    """Client-side chat connection."""
    
    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.sock: Optional[socket.socket] = None
        self.reader = None
        self.write_lock = threading.Lock()
        self.reader_thread: Optional[threading.Thread] = None
        self.message_handler: Optional[Callable[[str], None]] = None
        self.disconnect_handler: Optional[Callable[[str], None]] = None
        self.connected = False
        self._disconnect_notified = threading.Event()
    
    def set_message_handler(self, handler: Callable[[str], None]):
        """Set the handler called with every line received from the server."""
        self.message_handler = handler
    
    def set_disconnect_handler(self, handler: Callable[[str], None]):
        """Set the handler called once when the connection ends."""
        self.disconnect_handler = handler
    
    def connect(self) -> bool:
        """Open the connection to the server."""
        host, port = self.config.host, self.config.port
        try:
            self.sock = socket.create_connection((host, port), timeout=self.config.connect_timeout)
        except OSError as e:
            logger.log_connection(host, port, False)
            logger.log_error("connection", e)
            return False
        
        self.sock.settimeout(None)
        self.reader = self.sock.makefile('r', encoding=ENCODING, errors='replace')
        self.connected = True
        self._disconnect_notified.clear()
        logger.log_connection(host, port, True)
        return True
    
    def describe_peer(self) -> str:
        """Describe the server end as ``hostname/ip:port``."""
        ip, port = self.sock.getpeername()[:2]
        return f"{self.config.host}/{ip}:{port}"
    
    def read_line(self) -> Optional[str]:
        """Read one line synchronously; None once the server has gone."""
        try:
            raw = self.reader.readline()
        except (OSError, ValueError) as e:
            logger.debug(f"Read failed: {e}")
            return None
        if not raw:
            return None
        return raw.rstrip('\r\n')
    
    def start_listening(self):
        """Start the reader thread."""
        self.reader_thread = threading.Thread(target=self._listen, name="chat-reader", daemon=True)
        self.reader_thread.start()
    
    def _listen(self):
        while True:
            line = self.read_line()
            if line is None:
                break
            if self.message_handler:
                try:
                    self.message_handler(line)
                except Exception as e:
                    logger.log_error("message handler", e)
        self._notify_disconnect("server closed the connection")
    
    def _notify_disconnect(self, reason: str):
        self.connected = False
        if self._disconnect_notified.is_set():
            return
        self._disconnect_notified.set()
        logger.log_disconnect(reason)
        if self.disconnect_handler:
            self.disconnect_handler(reason)
    
    def send_line(self, line: str) -> bool:
        """Send one line to the server."""
        if not self.sock or not self.connected:
            logger.error("Not connected to server")
            return False
        
        try:
            with self.write_lock:
                self.sock.sendall((line + '\n').encode(ENCODING))
        except OSError as e:
            logger.log_error("send", e)
            return False
        logger.log_chat_sent(line)
        return True
    
    def register(self, username: str) -> bool:
        """Send a registration line for ``username``."""
        logger.log_registration(username)
        return self.send_line(create_username_line(username))
    
    def request_user_list(self) -> bool:
        """Ask the server for the roster."""
        return self.send_line(Commands.ALL_USERS)
    
    def leave(self) -> bool:
        """Tell the server we are leaving."""
        return self.send_line(Commands.LEAVE)
    
    def close(self):
        """Close the connection."""
        self.connected = False
        if self.sock is None:
            return
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Shutdown skipped: {e}")
        if self.reader is not None:
            self.reader.close()
        self.sock.close()
