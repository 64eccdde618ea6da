"""
Test doubles shared by the server-side tests.
"""

import time


class FakeChannel:
    """Records delivered lines; can be told to fail."""
    
    def __init__(self, fail_with: Exception = None, flag_error: bool = False, on_send=None,
                 close_delay: float = 0):
        self.lines = []
        self.fail_with = fail_with
        self.flag_error = flag_error
        self.on_send = on_send
        self.close_delay = close_delay
        self.closed = False
        self.aborted = False
    
    def send(self, text: str):
        if self.on_send:
            self.on_send()
        if self.fail_with is not None:
            raise self.fail_with
        self.lines.append(text)
    
    def check_error(self) -> bool:
        return self.flag_error
    
    def close(self):
        # stands in for a writer that takes a while to flush
        time.sleep(self.close_delay)
        self.closed = True
    
    def abort(self):
        self.aborted = True
