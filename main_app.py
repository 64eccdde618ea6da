#!/usr/bin/env python3
"""
MiniChat - Desktop Application Launcher
"""

import sys
import os
import argparse
from PyQt6.QtWidgets import QApplication

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from client.ui.client_gui import ClientMainWindow
from common.constants import DEFAULT_HOST, DEFAULT_PORT


def main():
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(
        description='MiniChat desktop client',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Connect to local server
  python main_app.py
  
  # Prefill a remote server and a username
  python main_app.py --server 192.168.1.100 --port 8989 --username alice --connect
        """
    )
    parser.add_argument('--server', type=str, default=DEFAULT_HOST,
                        help=f'Server IP address (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server TCP port (default: {DEFAULT_PORT})')
    parser.add_argument('--username', type=str, default=None,
                        help='Username (entered in the window if not provided)')
    parser.add_argument('--connect', action='store_true',
                        help='Connect immediately when a username is given')
    
    args = parser.parse_args()
    
    app = QApplication(sys.argv)
    app.setApplicationName("MiniChat")
    
    window = ClientMainWindow(server_host=args.server, server_port=args.port,
                              username=args.username)
    window.show()
    
    if args.connect and args.username:
        window.connect_to_server()
    
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
