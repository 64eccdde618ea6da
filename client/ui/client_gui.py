#!/usr/bin/env python3
"""
Client GUI - PyQt6 desktop front end

Connection fields, a read-only chat area and Send / All Users controls on top
of ChatClient. Lines arrive on the ChatClient reader thread and are marshalled
to the GUI thread through Qt signals.
"""

import sys
import os
from datetime import datetime

# PyQt6 imports
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGroupBox,
    QLabel, QPushButton, QTextEdit, QLineEdit, QMessageBox, QStatusBar
)
from PyQt6.QtCore import QTimer, pyqtSignal
from PyQt6.QtGui import QFont

sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
from client.chat.chat_client import ChatClient
from client.utils.config import ClientConfig
from common.constants import DEFAULT_HOST, DEFAULT_PORT, CLOCK_FORMAT, Commands
from common.protocol_definitions import is_registration_error, is_server_prompt


# ============================================================================
# CHAT WIDGET
# ============================================================================

class ChatWidget(QWidget):
    """Chat transcript with message input."""
    
    message_sent = pyqtSignal(str)  # message text
    all_users_requested = pyqtSignal()
    
    def __init__(self):
        super().__init__()
        self.setup_ui()
        self.set_input_enabled(False)
    
    def setup_ui(self):
        """Setup chat interface UI."""
        layout = QVBoxLayout()
        layout.setSpacing(5)
        layout.setContentsMargins(5, 5, 5, 5)
        
        self.chat_text = QTextEdit()
        self.chat_text.setReadOnly(True)
        self.chat_text.setFont(QFont("Monospace", 10))
        self.chat_text.setMinimumSize(560, 320)
        layout.addWidget(self.chat_text)
        
        input_layout = QHBoxLayout()
        self.input_field = QLineEdit()
        self.input_field.setPlaceholderText("Type a message...")
        self.input_field.returnPressed.connect(self.send_message)
        input_layout.addWidget(self.input_field)
        
        self.send_button = QPushButton("Send")
        self.send_button.clicked.connect(self.send_message)
        input_layout.addWidget(self.send_button)
        
        self.all_users_button = QPushButton("All Users")
        self.all_users_button.clicked.connect(self.all_users_requested)
        input_layout.addWidget(self.all_users_button)
        
        layout.addLayout(input_layout)
        self.setLayout(layout)
    
    def set_input_enabled(self, enabled: bool):
        self.input_field.setEnabled(enabled)
        self.send_button.setEnabled(enabled)
        self.all_users_button.setEnabled(enabled)
    
    def send_message(self):
        """Send chat message."""
        text = self.input_field.text().strip()
        if text:
            self.message_sent.emit(text)
            self.input_field.clear()
    
    def add_message(self, text: str, sender: str = None):
        """Append one line, stamped with the local time."""
        timestamp = datetime.now().strftime(CLOCK_FORMAT)
        if sender:
            self.chat_text.append(f"[{timestamp}] {sender}: {text}")
        else:
            self.chat_text.append(f"[{timestamp}] {text}")
        
        # Auto scroll to bottom
        scrollbar = self.chat_text.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())


# ============================================================================
# MAIN WINDOW
# ============================================================================

class ClientMainWindow(QMainWindow):
    """Main application window."""
    
    # Signals to marshal reader-thread events to the GUI thread
    line_received = pyqtSignal(str)
    connection_lost = pyqtSignal(str)
    
    def __init__(self, server_host: str = DEFAULT_HOST, server_port: int = DEFAULT_PORT,
                 username: str = ''):
        super().__init__()
        self.chat_client = None
        self.connected = False
        self.registered = False
        self.skip_prompt = False
        
        self.setup_ui(server_host, server_port, username or '')
        self.setup_connections()
        self.update_connection_status(False)
    
    def setup_ui(self, server_host: str, server_port: int, username: str):
        """Setup the main window UI."""
        self.setWindowTitle("MiniChat Client")
        
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout()
        
        # Connection settings
        connection_box = QGroupBox("Connection")
        connection_layout = QHBoxLayout()
        connection_layout.addWidget(QLabel("Server:"))
        self.server_field = QLineEdit(server_host)
        connection_layout.addWidget(self.server_field)
        connection_layout.addWidget(QLabel("Port:"))
        self.port_field = QLineEdit(str(server_port))
        self.port_field.setMaximumWidth(70)
        connection_layout.addWidget(self.port_field)
        connection_layout.addWidget(QLabel("Username:"))
        self.username_field = QLineEdit(username)
        connection_layout.addWidget(self.username_field)
        
        self.connect_button = QPushButton("Connect")
        connection_layout.addWidget(self.connect_button)
        self.disconnect_button = QPushButton("Disconnect")
        connection_layout.addWidget(self.disconnect_button)
        connection_box.setLayout(connection_layout)
        main_layout.addWidget(connection_box)
        
        self.chat_widget = ChatWidget()
        main_layout.addWidget(self.chat_widget)
        
        central_widget.setLayout(main_layout)
        
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
    
    def setup_connections(self):
        """Setup signal-slot connections."""
        self.connect_button.clicked.connect(self.connect_to_server)
        self.disconnect_button.clicked.connect(self.disconnect_from_server)
        self.chat_widget.message_sent.connect(self.on_send_message)
        self.chat_widget.all_users_requested.connect(self.on_all_users)
        self.line_received.connect(self.handle_line)
        self.connection_lost.connect(self.on_connection_lost)
    
    # ========================================================================
    # CONNECTION & NETWORKING
    # ========================================================================
    
    def connect_to_server(self) -> bool:
        """Connect with the values in the connection fields and register."""
        host = self.server_field.text().strip()
        port_text = self.port_field.text().strip()
        username = self.username_field.text().strip()
        
        if not host or not port_text or not username:
            self.show_error("Please fill in all connection fields")
            return False
        if not port_text.isdigit():
            self.show_error("Invalid port number")
            return False
        
        self.chat_client = ChatClient(ClientConfig(host, int(port_text), username))
        self.chat_client.set_message_handler(self.line_received.emit)
        self.chat_client.set_disconnect_handler(self.connection_lost.emit)
        
        if not self.chat_client.connect():
            self.show_error(f"Connection failed: could not reach {host}:{port_text}")
            self.chat_client = None
            return False
        
        self.connected = True
        self.skip_prompt = True
        self.chat_client.start_listening()
        self.registered = self.chat_client.register(username)
        self.chat_widget.add_message(f"Connected to {host}:{port_text}", sender="System")
        self.update_connection_status(True)
        return True
    
    def disconnect_from_server(self):
        """Leave the chat and drop the connection."""
        if not self.connected:
            return
        self.connected = False
        self.registered = False
        self.chat_client.leave()
        
        client = self.chat_client
        grace_ms = int(client.config.leave_grace_period * 1000)
        QTimer.singleShot(grace_ms, client.close)
        
        self.chat_widget.add_message("Disconnected from server", sender="System")
        self.update_connection_status(False)
    
    def handle_line(self, line: str):
        """Show one server line (GUI thread)."""
        # The server greets every connection with the registration prompt
        if self.skip_prompt and is_server_prompt(line):
            self.skip_prompt = False
            return
        if is_registration_error(line):
            self.chat_widget.add_message(line, sender="System")
            self.abandon_connection()
            return
        self.chat_widget.add_message(line)
    
    def abandon_connection(self):
        """Drop a connection whose name was refused so another can be tried."""
        self.connected = False
        self.registered = False
        self.chat_client.close()
        self.update_connection_status(False)
    
    def on_connection_lost(self, reason: str):
        if self.connected:
            self.connected = False
            self.registered = False
            self.chat_widget.add_message("Connection lost", sender="System")
            self.update_connection_status(False)
    
    def on_send_message(self, text: str):
        """Send chat line to server."""
        if not (self.connected and self.registered):
            return
        if text == Commands.LEAVE:
            self.disconnect_from_server()
            return
        self.chat_client.send_line(text)
    
    def on_all_users(self):
        if self.connected and self.registered:
            self.chat_client.request_user_list()
    
    def update_connection_status(self, is_connected: bool):
        self.connect_button.setEnabled(not is_connected)
        self.disconnect_button.setEnabled(is_connected)
        self.chat_widget.set_input_enabled(is_connected)
        
        self.server_field.setEnabled(not is_connected)
        self.port_field.setEnabled(not is_connected)
        self.username_field.setEnabled(not is_connected)
        
        if is_connected:
            self.status_bar.showMessage(f"Connected as {self.username_field.text().strip()}")
        else:
            self.status_bar.showMessage("Disconnected")
    
    def show_error(self, message: str):
        QMessageBox.critical(self, "Error", message)
    
    def closeEvent(self, event):
        """Say Bye before the window goes away."""
        if self.connected:
            self.connected = False
            self.chat_client.leave()
            self.chat_client.close()
        super().closeEvent(event)


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main():
    """Main entry point."""
    app = QApplication(sys.argv)
    
    # Get server address from environment or use default
    server_host = os.environ.get('SERVER_IP', DEFAULT_HOST)
    server_port = int(os.environ.get('SERVER_PORT', str(DEFAULT_PORT)))
    
    window = ClientMainWindow(server_host, server_port)
    window.show()
    
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
