#!/usr/bin/env python3
"""
MiniChat Client - Main Entry Point

Usage:
    python main_client.py [HOST PORT] [--gui | --cli]

Modes:
    --cli        Interactive terminal client (default)
    --gui        PyQt6 desktop client
"""

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from common.constants import DEFAULT_HOST, DEFAULT_PORT


def run_gui_client(username: str = None, server_host: str = DEFAULT_HOST, server_port: int = DEFAULT_PORT):
    """Run the GUI client."""
    try:
        from client.ui.client_gui import ClientMainWindow
        from PyQt6.QtWidgets import QApplication
    except ImportError:
        print("[ERROR] PyQt6 not installed. Install with: pip install PyQt6")
        return 1
    
    app = QApplication(sys.argv)
    window = ClientMainWindow(server_host, server_port, username)
    window.show()
    return app.exec()


def run_cli_client(server_host: str = DEFAULT_HOST, server_port: int = DEFAULT_PORT):
    """Run the terminal client."""
    from client.main_client import run_terminal_client
    return run_terminal_client(server_host, server_port)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description='MiniChat Client')
    parser.add_argument('host', nargs='?', default=DEFAULT_HOST,
                        help=f'Server address (default: {DEFAULT_HOST})')
    parser.add_argument('port', nargs='?', type=int, default=DEFAULT_PORT,
                        help=f'Server port (default: {DEFAULT_PORT})')
    parser.add_argument('--username', type=str, default=None,
                        help='Prefill the username field (GUI only)')
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--gui', action='store_true', help='Run the desktop client')
    mode.add_argument('--cli', action='store_true', help='Run the terminal client (default)')
    
    args = parser.parse_args(argv)
    
    if args.gui:
        return run_gui_client(args.username, args.host, args.port)
    return run_cli_client(args.host, args.port)


if __name__ == "__main__":
    sys.exit(main())
