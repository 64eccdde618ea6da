#!/usr/bin/env python3
"""
MiniChat Server - Listener

This module owns the listening socket. It accepts connections, hands each one
to a ClientHandler running on its own thread, and tears every session down
when the server stops.
"""

import socket
import threading
from typing import Optional

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from server.chat.client_handler import ClientHandler
from server.chat.session_registry import SessionRegistry
from server.utils.config import ServerConfig
from server.utils.logger import logger


class ChatServer:
    """Accept loop plus the shared session registry."""
    
    def __init__(self, host: str = None, port: int = None, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        if host is not None:
            self.config.host = host
        if port is not None:
            self.config.port = port
        
        self.registry = SessionRegistry()
        self.shutdown_lock = threading.Lock()
        self.is_shut_down = False
        
        # Bound and listening from here on, clients may connect before start()
        self.server_socket = socket.create_server(
            (self.config.host, self.config.port),
            backlog=self.config.backlog
        )
    
    @property
    def port(self) -> int:
        """Port actually bound (useful when configured with port 0)."""
        return self.server_socket.getsockname()[1]
    
    def start(self):
        """Run the accept loop until shutdown()."""
        logger.log_listening(self.config.host, self.port)
        
        while not self.is_shut_down:
            try:
                conn, addr = self.server_socket.accept()
            except OSError as e:
                if self.is_shut_down:
                    break
                logger.log_error("accepting connection", e)
                continue
            
            if self.is_shut_down:
                conn.close()
                break
            
            logger.log_connection(addr)
            handler = ClientHandler(conn, addr, self.registry, self.config)
            thread = threading.Thread(
                target=handler.run, name=f"client-{addr[0]}:{addr[1]}", daemon=True
            )
            thread.start()
    
    def start_in_background(self) -> threading.Thread:
        """Run the accept loop on a daemon thread."""
        thread = threading.Thread(target=self.start, name="accept-loop", daemon=True)
        thread.start()
        return thread
    
    def shutdown(self):
        """Stop accepting, close every session, release the listening socket."""
        with self.shutdown_lock:
            if self.is_shut_down:
                return
            self.is_shut_down = True
        
        logger.info("Shutting down server...")
        self.registry.shutdown_all()
        
        # shutdown() wakes a thread blocked in accept() on Linux
        try:
            self.server_socket.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Listening socket shutdown skipped: {e}")
        self.server_socket.close()
