"""
Session registry module.

This module holds the process-wide directory of registered participants and
the fan-out built on it: server and chat broadcasts, the roster reply, and
teardown at shutdown.
"""

import threading
from datetime import datetime
from typing import Dict, List

from common.protocol_definitions import (
    SessionInfo, format_chat_line, format_server_line, format_user_list
)
from server.utils.logger import logger


class Session:
    """One registered participant."""
    
    def __init__(self, username: str, channel, joined_at: datetime):
        self.username = username
        self.channel = channel  # referenced, owned by the connection
        self.joined_at = joined_at
    
    def info(self) -> SessionInfo:
        return SessionInfo(self.username, self.joined_at)


class SessionRegistry:
    """
    Shared map from display name to Session.

    A channel is any object with ``send(text)``, ``check_error()``,
    ``close()`` and ``abort()``; see OutboundChannel. The lock guards the map
    only and is never held while delivering.
    """
    
    def __init__(self):
        self.sessions: Dict[str, Session] = {}
        self.lock = threading.Lock()
    
    def register(self, username: str, channel, joined_at: datetime) -> bool:
        """Add a session under ``username``; False if the name is taken."""
        with self.lock:
            if username in self.sessions:
                return False
            self.sessions[username] = Session(username, channel, joined_at)
        return True
    
    def remove(self, username: str, channel=None) -> bool:
        """
        Remove a session if present.

        With ``channel`` given, the entry is removed only while ``username``
        still belongs to that channel, so a stale connection cannot evict a
        newer holder of the same name.
        """
        with self.lock:
            session = self.sessions.get(username)
            if session is None:
                return False
            if channel is not None and session.channel is not channel:
                return False
            del self.sessions[username]
        return True

    def holds(self, username: str, channel) -> bool:
        """True while ``username`` is registered to ``channel``."""
        with self.lock:
            session = self.sessions.get(username)
            return session is not None and session.channel is channel
    
    def broadcast_server_message(self, text: str):
        """Send a server-authored line to every session."""
        self._broadcast(format_server_line(text))
    
    def broadcast_from(self, username: str, text: str):
        """Send a chat line from ``username`` to every session, sender included."""
        self._broadcast(format_chat_line(username, text))
    
    def list_users(self, requester: str) -> str:
        """Build the roster for ``requester``."""
        snapshot = self._snapshot()
        logger.log_user_list(requester, len(snapshot))
        return format_user_list(session.info() for session in snapshot)
    
    def shutdown_all(self):
        """Close every session's channel and empty the registry."""
        with self.lock:
            sessions = list(self.sessions.values())
            self.sessions.clear()

        # each close may wait up to close_timeout for its writer
        closers = [
            threading.Thread(target=self._close_session, args=(session,),
                             name=f"close-{session.username}", daemon=True)
            for session in sessions
        ]
        for closer in closers:
            closer.start()
        for closer in closers:
            closer.join()
    
    def user_count(self) -> int:
        with self.lock:
            return len(self.sessions)
    
    def has_user(self, username: str) -> bool:
        with self.lock:
            return username in self.sessions
    
    def _snapshot(self) -> List[Session]:
        with self.lock:
            return list(self.sessions.values())
    
    def _broadcast(self, line: str):
        failed: List[Session] = []
        
        for session in self._snapshot():
            try:
                session.channel.send(line)
            except OSError as e:
                logger.log_delivery_failure(session.username, e)
                failed.append(session)
                continue
            
            if session.channel.check_error():
                failed.append(session)
        
        if failed:
            self._reap(failed)
    
    def _close_session(self, session: Session):
        try:
            session.channel.close()
        except OSError as e:
            logger.log_error(f"closing {session.username}", e)

    def _reap(self, failed: List[Session]):
        reaped: List[Session] = []
        with self.lock:
            for session in failed:
                # the name may already belong to a newer session
                if self.sessions.get(session.username) is session:
                    del self.sessions[session.username]
                    reaped.append(session)

        # The owning handler reads EOF and runs its own cleanup
        for session in reaped:
            logger.log_reaped(session.username)
            session.channel.abort()
