"""
Client handler module.

One ClientHandler runs per accepted connection, on its own thread. It owns the
connection's transport and drives the per-connection state machine:
registration first, then the chat loop, then cleanup exactly once.
"""

import socket
from datetime import datetime
from typing import Optional

from common.constants import ENCODING, Commands, Prompts
from common.protocol_definitions import goodbye_text, parse_username_line, welcome_text
from server.chat.outbound_channel import OutboundChannel
from server.chat.session_registry import SessionRegistry
from server.utils.config import ServerConfig
from server.utils.logger import logger


class ConnectionState:
    UNREGISTERED = 'unregistered'
    REGISTERED = 'registered'
    CLOSED = 'closed'


class ClientHandler:
    """Server side of one chat connection."""
    
    def __init__(self, sock: socket.socket, addr: tuple, registry: SessionRegistry,
                 config: Optional[ServerConfig] = None):
        self.sock = sock
        self.addr = addr
        self.registry = registry
        self.config = config or ServerConfig()
        self.state = ConnectionState.UNREGISTERED
        self.username: Optional[str] = None
        self.channel: Optional[OutboundChannel] = None
        self.reader = None
    
    def run(self):
        """Serve the connection until it closes."""
        try:
            self.channel = OutboundChannel(
                self.sock,
                label=f"{self.addr}",
                queue_size=self.config.send_queue_size,
                close_timeout=self.config.close_timeout
            )
            self.reader = self.sock.makefile('r', encoding=ENCODING, errors='replace')
            
            if self.handle_registration():
                self.handle_chat_loop()
        except OSError as e:
            logger.log_error(f"connection {self.addr}", e)
        finally:
            self.cleanup()
    
    def send(self, text: str):
        """Reply to this connection only."""
        self.channel.send(text)
    
    def read_line(self) -> Optional[str]:
        """Next trimmed line, or None once the peer has gone."""
        raw = self.reader.readline()
        if not raw:
            return None
        return raw.strip()
    
    def handle_registration(self) -> bool:
        """Run the registration phase; False if the peer left before joining."""
        self.send(Prompts.SET_USERNAME)
        
        while True:
            line = self.read_line()
            if line is None:
                return False
            if not line:
                continue
            
            proposed = parse_username_line(line)
            if proposed is None:
                self.send(Prompts.SET_USERNAME)
            elif not proposed:
                self.send(Prompts.USERNAME_EMPTY)
            elif self.registry.register(proposed, self.channel, datetime.now().astimezone()):
                self.username = proposed
                self.state = ConnectionState.REGISTERED
                logger.log_login(proposed, self.addr)
                self.registry.broadcast_server_message(welcome_text(proposed))
                return True
            else:
                logger.log_login_rejected(proposed, self.addr)
                self.send(Prompts.USERNAME_TAKEN)
    
    def handle_chat_loop(self):
        """Relay lines until Bye or disconnect."""
        while True:
            line = self.read_line()
            if line is None:
                return
            if not line:
                continue

            # Reaped after a failed delivery; the name may already be reused
            if not self.registry.holds(self.username, self.channel):
                logger.debug(f"{self.username} at {self.addr} is no longer registered")
                return

            if line == Commands.LEAVE:
                logger.log_leave(self.username)
                return
            
            if line == Commands.ALL_USERS:
                self.send(self.registry.list_users(self.username))
                continue
            
            # A client may still prefix its chat with "username = "
            payload = parse_username_line(line)
            if not payload:
                payload = line
            
            logger.log_chat(self.username, payload)
            self.registry.broadcast_from(self.username, payload)
    
    def cleanup(self):
        """Leave the registry, say goodbye and release the transport, once."""
        if self.state == ConnectionState.CLOSED:
            return
        joined = self.state == ConnectionState.REGISTERED
        self.state = ConnectionState.CLOSED
        
        if joined:
            self.registry.remove(self.username, self.channel)
            self.registry.broadcast_server_message(goodbye_text(self.username))
            logger.log_disconnect(self.username)
        
        if self.channel is not None:
            self.channel.close()
        if self.reader is not None:
            self.reader.close()
        self.sock.close()
