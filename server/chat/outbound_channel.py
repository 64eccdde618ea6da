"""
Outbound channel module.

Each accepted connection owns one OutboundChannel. It is the send-handle the
session registry delivers to: sends are queued and written by a dedicated
writer thread, so a slow or unresponsive peer never stalls the thread that is
broadcasting.
"""

import queue
import socket
import threading
from typing import Optional

from common.constants import ENCODING, SEND_QUEUE_SIZE, CLOSE_TIMEOUT
from server.utils.logger import logger


class OutboundChannel:
    """Thread-safe line writer for one connection."""
    
    _CLOSE = object()
    _POLL_INTERVAL = 0.5  # seconds
    
    def __init__(self, sock: socket.socket, label: str = '',
                 queue_size: int = SEND_QUEUE_SIZE, close_timeout: float = CLOSE_TIMEOUT):
        self.sock = sock
        self.label = label
        self.close_timeout = close_timeout
        self.queue: queue.Queue = queue.Queue(maxsize=queue_size)
        self.lock = threading.Lock()
        self.closed = False
        self.error: Optional[Exception] = None
        
        self.writer_thread = threading.Thread(
            target=self._drain, name=f"writer-{label}", daemon=True
        )
        self.writer_thread.start()
    
    def send(self, text: str):
        """
        Queue one line (or a block of lines) for delivery.

        Raises ConnectionError if the channel is closed, has already failed,
        or its peer has stopped reading for long enough to fill the queue.
        """
        with self.lock:
            if self.closed:
                raise ConnectionError(f"channel {self.label} is closed")
            if self.error is not None:
                raise ConnectionError(f"channel {self.label} is broken: {self.error}")
            try:
                self.queue.put_nowait(text + '\n')
            except queue.Full:
                self.error = ConnectionError(f"channel {self.label} stalled, send queue full")
                raise self.error
    
    def check_error(self) -> bool:
        """Report whether an earlier write failed."""
        return self.error is not None
    
    def close(self):
        """Flush pending lines, then shut the connection down in both directions."""
        with self.lock:
            if self.closed:
                return
            self.closed = True
        
        try:
            self.queue.put_nowait(self._CLOSE)
        except queue.Full:
            pass  # writer notices self.closed once the queue drains
        
        if threading.current_thread() is not self.writer_thread:
            self.writer_thread.join(self.close_timeout)
        
        # shutdown() wakes a reader blocked on this socket, close() alone does not
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Shutdown of {self.label} skipped: {e}")
        self.sock.close()
    
    def abort(self):
        """
        Drop the connection without flushing or waiting for the writer.

        Both directions are shut down, so the connection's reader sees end of
        input and a writer stuck in sendall() fails. The socket itself is left
        for its owner to close.
        """
        with self.lock:
            if self.closed:
                return
            self.closed = True

        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Shutdown of {self.label} skipped: {e}")

    def _drain(self):
        """Writer thread loop."""
        while True:
            try:
                item = self.queue.get(timeout=self._POLL_INTERVAL)
            except queue.Empty:
                if self.closed:
                    return
                continue
            
            if item is self._CLOSE:
                return
            if self.error is not None:
                continue
            
            try:
                self.sock.sendall(item.encode(ENCODING))
            except OSError as e:
                with self.lock:
                    self.error = e
                logger.debug(f"Write to {self.label} failed: {e}")
