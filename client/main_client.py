#!/usr/bin/env python3
"""
MiniChat Client - Terminal front end

Reads lines from the console and relays them to the server; prints everything
the server sends except its technical registration prompts.
"""

import sys
import os
import threading
from typing import Optional, TextIO

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from client.chat.chat_client import ChatClient
from client.utils.config import ClientConfig
from client.utils.logger import logger
from common.constants import Commands
from common.protocol_definitions import is_registration_error, is_server_prompt

ENTER_USERNAME = "Enter the username:"


class TerminalClient:
    """Interactive console client."""
    
    def __init__(self, host: str = None, port: int = None, config: Optional[ClientConfig] = None,
                 stdin: TextIO = None, stdout: TextIO = None):
        self.config = config or ClientConfig()
        if host is not None:
            self.config.host = host
        if port is not None:
            self.config.port = port
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        
        self.chat_client = ChatClient(self.config)
        self.chat_client.set_message_handler(self.handle_line)
        self.chat_client.set_disconnect_handler(self.handle_disconnect)
        
        self.running = threading.Event()
        self.registered = False
        self.print_lock = threading.Lock()
    
    def display(self, text: str):
        with self.print_lock:
            print(text, file=self.stdout, flush=True)
    
    def connect(self) -> bool:
        """Connect and announce the peer."""
        if not self.chat_client.connect():
            return False
        self.running.set()
        self.display(f"Connection accepted {self.chat_client.describe_peer()}\n")
        return True
    
    def run(self):
        """Register, then relay console lines until Bye or disconnect."""
        try:
            if self.register():
                self.chat_client.start_listening()
                self.write_loop()
        finally:
            self.shutdown()
    
    def register(self) -> bool:
        """Ask for a name and send the registration line."""
        prompt = self.chat_client.read_line()
        if prompt is None:
            self.display("Connection to server lost")
            return False
        if is_server_prompt(prompt):
            self.display(ENTER_USERNAME)
        else:
            self.display(prompt)
        
        username = self.stdin.readline()
        if not username:
            return False
        
        self.config.username = username.strip()
        self.registered = self.chat_client.register(self.config.username)
        return self.registered
    
    def handle_line(self, line: str):
        """Show one server line."""
        if is_registration_error(line):
            self.registered = False
            self.display(line)
            self.display(ENTER_USERNAME)
        elif is_server_prompt(line):
            return
        else:
            self.display(line)
    
    def handle_disconnect(self, reason: str):
        if self.running.is_set():
            self.display("Connection to server lost")
        self.running.clear()
    
    def write_loop(self):
        """Relay console lines to the server."""
        while self.running.is_set():
            line = self.stdin.readline()
            if not line:
                break
            line = line.rstrip('\r\n')
            
            if not self.registered:
                self.config.username = line.strip()
                self.registered = self.chat_client.register(self.config.username)
                continue
            
            if line == Commands.LEAVE:
                self.running.clear()
                self.chat_client.send_line(line)
                break
            if not self.chat_client.send_line(line):
                break
    
    def shutdown(self):
        self.running.clear()
        self.chat_client.close()


def run_terminal_client(host: str, port: int) -> int:
    """Connect and run until the user leaves."""
    client = TerminalClient(host, port)
    if not client.connect():
        print(f"Failed to connect to server at {host}:{port}", file=sys.stderr)
        return 1
    try:
        client.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        client.shutdown()
    return 0
