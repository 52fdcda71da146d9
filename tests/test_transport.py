import socket
import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

from ecpsi.crypto_utils import hash_bytes
from ecpsi.errors import InvalidBlindedPointsError
from ecpsi.transport import LineChannel, connect, listen, run_session
from ecpsi.wire import WireFormatError

ALICE = [b"alice_secret_1", b"shared_item_1", b"alice_secret_2", b"shared_item_2"]
BOB = [b"bob_secret_1", b"shared_item_1", b"bob_secret_2", b"shared_item_2", b"bob_secret_3"]


class SessionTest(unittest.TestCase):

    def setUp(self):
        a, b = socket.socketpair()
        a.settimeout(30)
        b.settimeout(30)
        self.left = LineChannel(a)
        self.right = LineChannel(b)

    def tearDown(self):
        self.left.close()
        self.right.close()

    def test_run_session(self):
        with ThreadPoolExecutor(max_workers=2) as pool:
            client = pool.submit(run_session, self.left, ALICE, True)
            server = pool.submit(run_session, self.right, BOB, False)
            client_result = client.result(timeout=60)
            server_result = server.result(timeout=60)

        expected = {hash_bytes(b"shared_item_1"), hash_bytes(b"shared_item_2")}
        self.assertEqual(client_result.intersection_hashes, expected)
        self.assertEqual(server_result.intersection_hashes, expected)
        self.assertEqual(client_result.double_blinded_map, server_result.double_blinded_map)

    def test_send_recv_points(self):
        self.left.send_points([b"\x02" * 33, b"\x03" * 33])
        self.assertEqual(self.right.recv_points(), [b"\x02" * 33, b"\x03" * 33])

    def test_peer_closes_mid_message(self):
        self.left.sock.sendall(b"2\n" + b"02" * 33 + b"\n")
        self.left.sock.shutdown(socket.SHUT_WR)
        with self.assertRaises(WireFormatError):
            self.right.recv_points()

    def test_oversized_line_rejected(self):
        self.left.sock.sendall(b"1\n" + b"a" * 1000 + b"\n")
        with self.assertRaises(WireFormatError):
            self.right.recv_points()

    def test_oversized_count_rejected(self):
        self.left.sock.sendall(b"99999999999\n")
        with self.assertRaises(WireFormatError):
            self.right.recv_points()

    def test_garbage_points_rejected(self):
        def bad_peer():
            self.right.recv_points()
            self.right.send_points([b"\x05" * 33])

        peer = threading.Thread(target=bad_peer)
        peer.start()
        try:
            with self.assertRaises(InvalidBlindedPointsError):
                run_session(self.left, ALICE, True)
        finally:
            peer.join(timeout=30)


class TcpTest(unittest.TestCase):

    def test_listen_connect(self):
        probe = socket.socket()
        probe.bind(("127.0.0.1", 0))
        port = probe.getsockname()[1]
        probe.close()

        with ThreadPoolExecutor(max_workers=1) as pool:
            accepted = pool.submit(listen, "127.0.0.1", port, 30)
            client = None
            for _ in range(100):
                try:
                    client = connect("127.0.0.1", port, 30)
                    break
                except ConnectionRefusedError:
                    threading.Event().wait(0.05)
            self.assertIsNotNone(client)
            server = accepted.result(timeout=30)

        with client, server:
            client.send_points([b"\x02" * 33])
            self.assertEqual(server.recv_points(), [b"\x02" * 33])


if __name__ == "__main__":
    unittest.main()
