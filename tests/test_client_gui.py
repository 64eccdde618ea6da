#!/usr/bin/env python3
"""
Unit tests for the PyQt6 desktop client.

The network side is replaced with a mock ChatClient; the window runs on the
offscreen Qt platform.
"""

import os
import unittest
from unittest.mock import Mock, patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from PyQt6.QtWidgets import QApplication
from client.ui.client_gui import ClientMainWindow
from client.utils.config import ClientConfig
from common.constants import Prompts


class TestClientMainWindow(unittest.TestCase):
    """Test cases for the main window's protocol handling."""
    
    @classmethod
    def setUpClass(cls):
        """Create QApplication once for all tests."""
        if not QApplication.instance():
            cls.app = QApplication([])
        else:
            cls.app = QApplication.instance()
    
    def setUp(self):
        self.window = ClientMainWindow('localhost', 8989, 'Alice')
        self.chat_client = Mock()
        self.chat_client.config = ClientConfig('localhost', 8989, 'Alice')
    
    def tearDown(self):
        self.window.connected = False
        self.window.deleteLater()
    
    def transcript(self) -> str:
        return self.window.chat_widget.chat_text.toPlainText()
    
    def attach(self):
        """Put the window in the state it has right after connecting."""
        self.window.chat_client = self.chat_client
        self.window.connected = True
        self.window.registered = True
        self.window.skip_prompt = True
        self.window.update_connection_status(True)
    
    def test_initially_disconnected(self):
        self.assertTrue(self.window.connect_button.isEnabled())
        self.assertFalse(self.window.disconnect_button.isEnabled())
        self.assertFalse(self.window.chat_widget.send_button.isEnabled())
        self.assertEqual(self.window.username_field.text(), 'Alice')
    
    def test_connect_requires_all_fields(self):
        self.window.username_field.setText('')
        with patch.object(self.window, 'show_error') as mock_error:
            self.assertFalse(self.window.connect_to_server())
            mock_error.assert_called_once_with("Please fill in all connection fields")
    
    def test_connect_rejects_bad_port(self):
        self.window.port_field.setText('port')
        with patch.object(self.window, 'show_error') as mock_error:
            self.assertFalse(self.window.connect_to_server())
            mock_error.assert_called_once_with("Invalid port number")
    
    def test_connect_registers_username(self):
        with patch('client.ui.client_gui.ChatClient', return_value=self.chat_client):
            self.chat_client.connect.return_value = True
            self.chat_client.register.return_value = True
            self.assertTrue(self.window.connect_to_server())
        
        self.chat_client.start_listening.assert_called_once()
        self.chat_client.register.assert_called_once_with('Alice')
        self.assertFalse(self.window.connect_button.isEnabled())
        self.assertTrue(self.window.chat_widget.send_button.isEnabled())
    
    def test_first_prompt_hidden(self):
        self.attach()
        self.window.handle_line(Prompts.SET_USERNAME)
        self.window.handle_line("10:00:00 Server: Welcome Alice")
        
        text = self.transcript()
        self.assertNotIn("Please set your username", text)
        self.assertIn("10:00:00 Server: Welcome Alice", text)
    
    def test_registration_error_drops_connection(self):
        self.attach()
        self.window.handle_line(Prompts.SET_USERNAME)
        self.window.handle_line(Prompts.USERNAME_TAKEN)
        
        self.assertIn("Username already taken", self.transcript())
        self.chat_client.close.assert_called_once()
        self.assertFalse(self.window.connected)
        self.assertTrue(self.window.username_field.isEnabled())
    
    def test_send_message(self):
        self.attach()
        self.window.chat_widget.input_field.setText("  Hi there ")
        self.window.chat_widget.send_message()
        
        self.chat_client.send_line.assert_called_once_with("Hi there")
        self.assertEqual(self.window.chat_widget.input_field.text(), "")
    
    def test_all_users_button(self):
        self.attach()
        self.window.chat_widget.all_users_button.click()
        self.chat_client.request_user_list.assert_called_once()
    
    def test_typing_bye_disconnects(self):
        self.attach()
        with patch('client.ui.client_gui.QTimer') as mock_timer:
            self.window.on_send_message("Bye")
            mock_timer.singleShot.assert_called_once()
        
        self.chat_client.leave.assert_called_once()
        self.chat_client.send_line.assert_not_called()
        self.assertFalse(self.window.connected)
        self.assertTrue(self.window.connect_button.isEnabled())
    
    def test_nothing_sent_when_disconnected(self):
        self.window.chat_client = self.chat_client
        self.window.on_send_message("hello")
        self.window.on_all_users()
        self.chat_client.send_line.assert_not_called()
        self.chat_client.request_user_list.assert_not_called()
    
    def test_connection_lost(self):
        self.attach()
        self.window.on_connection_lost("server closed the connection")
        
        self.assertIn("Connection lost", self.transcript())
        self.assertFalse(self.window.chat_widget.input_field.isEnabled())


if __name__ == '__main__':
    unittest.main()
