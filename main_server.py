#!/usr/bin/env python3
"""
MiniChat Server - Main Entry Point

Line-oriented chat relay: every registered participant receives every chat
line, including their own.

Usage:
    python main_server.py [PORT]

Optional arguments:
    --host HOST           Bind address (default: 0.0.0.0)
    --port PORT           TCP port (default: 8989)
    --debug               Verbose logging
"""

import argparse
import logging
import signal
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT


def main(argv=None):
    """Main entry point."""
    from server.main_server import ChatServer
    from server.utils.config import ServerConfig
    from server.utils.logger import logger
    
    parser = argparse.ArgumentParser(description='MiniChat Server')
    parser.add_argument('port_arg', nargs='?', type=int, default=None, metavar='PORT',
                        help=f'TCP port (default: {DEFAULT_PORT})')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=None,
                        help=f'TCP port (default: {DEFAULT_PORT})')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    
    args = parser.parse_args(argv)
    port = args.port if args.port is not None else args.port_arg
    if port is None:
        port = DEFAULT_PORT
    if not 0 <= port <= 65535:
        logger.error(f"Invalid port number: {port}")
        return 1
    
    config = ServerConfig(host=args.host, port=port,
                          log_level=logging.DEBUG if args.debug else logging.INFO)
    logger.set_level(config.log_level)
    
    try:
        server = ChatServer(config=config)
    except OSError as e:
        logger.log_error("server startup", e)
        return 1
    
    def handle_sigterm(signum, frame):
        raise KeyboardInterrupt
    
    signal.signal(signal.SIGTERM, handle_sigterm)
    
    try:
        server.start()
    except KeyboardInterrupt:
        logger.info("Interrupt received")
    finally:
        server.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
