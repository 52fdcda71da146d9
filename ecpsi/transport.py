import logging
import socket

from .config import DEFAULT_HOST, DEFAULT_PORT, MAX_WIRE_LINE
from .messages import BlindedPointsMessage, DoubleBlindedPointsMessage
from .party import Party
from .wire import WireFormatError, dump_points, load_points

logger = logging.getLogger(__name__)


class LineChannel:
    """Blocking newline-framed channel over a connected socket."""

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self._reader = sock.makefile("r", encoding="ascii", newline="\n")

    def _lines(self):
        while True:
            line = self._reader.readline(MAX_WIRE_LINE + 1)
            if not line:
                raise WireFormatError("connection closed mid-message")
            if len(line) > MAX_WIRE_LINE:
                raise WireFormatError("line too long")
            yield line

    def send_points(self, points):
        self.sock.sendall(dump_points(points).encode("ascii"))

    def recv_points(self):
        return load_points(self._lines())

    def close(self):
        self._reader.close()
        self.sock.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def listen(host=DEFAULT_HOST, port=DEFAULT_PORT, timeout=None) -> LineChannel:
    """Wait for a single peer and return a channel to it."""
    with socket.create_server((host, port)) as server:
        server.settimeout(timeout)
        logger.info("listening on %s:%d", host, port)
        conn, addr = server.accept()
    conn.settimeout(timeout)
    logger.info("connected to %s:%d", addr[0], addr[1])
    return LineChannel(conn)


def connect(host=DEFAULT_HOST, port=DEFAULT_PORT, timeout=None) -> LineChannel:
    sock = socket.create_connection((host, port), timeout=timeout)
    logger.info("connected to %s:%d", host, port)
    return LineChannel(sock)


def _exchange(channel, points, initiator):
    # initiator talks first in every round so the two sides never both block on recv
    if initiator:
        channel.send_points(points)
        return channel.recv_points()
    received = channel.recv_points()
    channel.send_points(points)
    return received


def run_session(channel: LineChannel, elements, initiator: bool, party=None):
    """Run both protocol rounds over `channel` and return the IntersectionResult."""
    if party is None:
        party = Party()
    message = party.prepare(elements)
    peer_message = BlindedPointsMessage(tuple(_exchange(channel, message, initiator)))
    logger.info("round 1: sent %d, received %d blinded points",
                len(message), len(peer_message))

    reply = party.reblind(peer_message)
    peer_reply = DoubleBlindedPointsMessage(tuple(_exchange(channel, reply, initiator)))
    logger.info("round 2: sent %d, received %d double-blinded points",
                len(reply), len(peer_reply))

    return party.compute_intersection(peer_message, peer_reply)
