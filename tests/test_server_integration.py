#!/usr/bin/env python3
"""
Integration tests: real server on an ephemeral port, raw socket clients.
"""

import threading
import time
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from common.constants import Prompts
from server.main_server import ChatServer
from line_client import LineClient


class ServerTestCase(unittest.TestCase):
    
    def setUp(self):
        self.server = ChatServer(host='127.0.0.1', port=0)
        self.accept_thread = self.server.start_in_background()
        self.clients = []
    
    def tearDown(self):
        for client in self.clients:
            client.close()
        self.server.shutdown()
        self.accept_thread.join(5)
    
    def connect(self) -> LineClient:
        client = LineClient.connect('127.0.0.1', self.server.port)
        self.clients.append(client)
        self.assertEqual(client.read_line(), Prompts.SET_USERNAME)
        return client
    
    def join(self, name: str) -> LineClient:
        client = self.connect()
        client.send(f"username = {name}")
        welcome = client.read_line()
        self.assertIsNotNone(welcome)
        self.assertIn(f"Welcome {name}", welcome)
        return client
    
    def wait_until(self, predicate, timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.02)
        return predicate()


class TestCompleteServerFlow(ServerTestCase):
    
    def test_three_participants(self):
        uno = self.connect()
        cs = self.connect()
        unocc = self.connect()
        
        # Nothing is relayed before registration
        uno.send("Hello before registration")
        self.assertEqual(uno.read_line(), Prompts.SET_USERNAME)
        self.assertIsNone(cs.read_line(timeout=0.2))
        self.assertIsNone(unocc.read_line(timeout=0.2))
        
        uno.send("username = UNO")
        self.assertIn("Welcome UNO", uno.read_line())
        
        cs.send("username = CS")
        self.assertIn("Welcome CS", cs.read_line())
        self.assertIn("Welcome CS", uno.read_line())
        
        unocc.send("username = UNOCC")
        self.assertIn("Welcome UNOCC", unocc.read_line())
        self.assertIn("Welcome UNOCC", uno.read_line())
        self.assertIn("Welcome UNOCC", cs.read_line())
        
        # Broadcast reaches everyone, the sender included
        uno.send("Hi")
        for client in (uno, cs, unocc):
            line = client.read_line()
            self.assertIsNotNone(line)
            self.assertIn("UNO: Hi", line)
        
        # Roster only for the requester
        uno.send("AllUsers")
        roster = uno.read_block()
        entries = [line.strip() for line in roster if line.startswith("\t")]
        self.assertEqual(len(entries), 3)
        self.assertTrue(entries[0].startswith("1) CS since"))
        self.assertTrue(entries[1].startswith("2) UNO since"))
        self.assertTrue(entries[2].startswith("3) UNOCC since"))
        self.assertIsNone(cs.read_line(timeout=0.2))
        self.assertIsNone(unocc.read_line(timeout=0.2))
        
        # Bye: farewell for the others, transport closed for the leaver
        unocc.send("Bye")
        self.assertIn("Goodbye UNOCC", uno.read_line())
        self.assertIn("Goodbye UNOCC", cs.read_line())
        self.assertTrue(unocc.is_closed())


class TestRegistrationRules(ServerTestCase):
    
    def test_concurrent_claims_single_winner(self):
        contenders = [self.connect() for _ in range(5)]
        barrier = threading.Barrier(len(contenders))
        
        def claim(client):
            barrier.wait()
            client.send("username = Highlander")
        
        threads = [threading.Thread(target=claim, args=(client,)) for client in contenders]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(5)
        
        replies = [client.read_line() for client in contenders]
        winners = [reply for reply in replies if reply and "Welcome Highlander" in reply]
        losers = [reply for reply in replies if reply == Prompts.USERNAME_TAKEN]
        self.assertEqual(len(winners), 1)
        self.assertEqual(len(losers), len(contenders) - 1)
        self.assertEqual(self.server.registry.user_count(), 1)
    
    def test_name_free_again_after_bye(self):
        first = self.join("Alice")
        other = self.join("Bob")
        self.assertIn("Welcome Bob", first.read_line())
        
        taken = self.connect()
        taken.send("username = Alice")
        self.assertEqual(taken.read_line(), Prompts.USERNAME_TAKEN)
        
        first.send("Bye")
        self.assertIn("Goodbye Alice", other.read_line())
        
        taken.send("username = Alice")
        self.assertIn("Welcome Alice", taken.read_line())
    
    def test_name_free_again_after_disconnect(self):
        first = self.join("Alice")
        first.close()
        self.assertTrue(self.wait_until(lambda: not self.server.registry.has_user("Alice")))
        
        self.join("Alice")
    
    def test_unregistered_lines_are_never_broadcast(self):
        member = self.join("Member")
        stranger = self.connect()
        
        stranger.send("anyone there?")
        stranger.send("AllUsers")
        stranger.send("Bye")
        
        self.assertEqual(stranger.read_line(), Prompts.SET_USERNAME)
        self.assertIsNone(member.read_line(timeout=0.3))


class TestShutdown(ServerTestCase):
    
    def test_shutdown_closes_registered_sessions(self):
        alice = self.join("Alice")
        bob = self.join("Bob")
        
        self.server.shutdown()
        
        self.assertTrue(alice.is_closed())
        self.assertTrue(bob.is_closed())
        self.assertEqual(self.server.registry.user_count(), 0)
    
    def test_shutdown_is_idempotent(self):
        self.server.shutdown()
        self.server.shutdown()
        self.accept_thread.join(5)
        self.assertFalse(self.accept_thread.is_alive())


if __name__ == '__main__':
    unittest.main()
