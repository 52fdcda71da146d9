import argparse
import logging
import sys
import time

from .config import (DEFAULT_HOST, DEFAULT_PORT, ITEMS_ENCODING, LOG_FORMAT,
                     SOCKET_TIMEOUT)
from .crypto_utils import hash_bytes
from .errors import PsiError
from .party import Party
from .transport import connect, listen, run_session
from .wire import WireFormatError

ALICE_DEFAULT = ["apple", "banana", "cherry"]
BOB_DEFAULT = ["banana", "cherry", "date"]


def load_elements(filename):
    """One element per line; blank lines are skipped."""
    with open(filename, "r", encoding=ITEMS_ENCODING) as f:
        return [line.encode(ITEMS_ENCODING) for line in f.read().splitlines() if line]


def matching_elements(elements, result):
    # map intersection digests back to our own plaintext elements
    by_digest = {}
    for element in elements:
        by_digest.setdefault(hash_bytes(element), element)
    return [by_digest[d] for d in result.ordered(by_digest)]


def run_demo(alice_items, bob_items):
    alice_set = [s.encode(ITEMS_ENCODING) for s in alice_items]
    bob_set = [s.encode(ITEMS_ENCODING) for s in bob_items]
    print("Alice set:", alice_items)
    print("Bob set:", bob_items)

    timings = {}
    start = time.time()
    alice = Party()
    bob = Party()
    timings["setup"] = time.time() - start

    # Round 1: exchange blinded points
    start = time.time()
    alice_msg = alice.prepare(alice_set)
    bob_msg = bob.prepare(bob_set)
    timings["prepare"] = time.time() - start

    # Round 2: each side re-blinds the other's points and sends them back
    start = time.time()
    alice_reply = alice.reblind(bob_msg)
    bob_reply = bob.reblind(alice_msg)
    timings["reblind"] = time.time() - start

    start = time.time()
    alice_result = alice.compute_intersection(bob_msg, bob_reply)
    bob_result = bob.compute_intersection(alice_msg, alice_reply)
    timings["intersect"] = time.time() - start

    for phase, duration in timings.items():
        print(f"{phase.capitalize()} phase time: {duration:.6f} seconds")

    alice_common = [e.decode(ITEMS_ENCODING) for e in matching_elements(alice_set, alice_result)]
    bob_common = [e.decode(ITEMS_ENCODING) for e in matching_elements(bob_set, bob_result)]
    print("Alice intersection:", alice_common)
    print("Bob intersection:", bob_common)
    return alice_result, bob_result


def run_network(role, items_file, host, port, timeout):
    elements = load_elements(items_file)
    print(f"{role.capitalize()} items: {len(elements)}")
    if role == "server":
        channel = listen(host, port, timeout)
    else:
        channel = connect(host, port, timeout)
    with channel:
        result = run_session(channel, elements, initiator=(role == "client"))

    print(f"Intersection size: {len(result)}")
    for i, element in enumerate(matching_elements(elements, result), 1):
        print(f"  {i}: {element.decode(ITEMS_ENCODING, errors='replace')}")
    return result


def build_parser():
    parser = argparse.ArgumentParser(description="Two-party ECDH private set intersection on P-256")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    demo = sub.add_parser("demo", help="Run both parties in memory")
    demo.add_argument("--alice", nargs="+", default=ALICE_DEFAULT, help="Alice's elements")
    demo.add_argument("--bob", nargs="+", default=BOB_DEFAULT, help="Bob's elements")

    for role in ("server", "client"):
        net = sub.add_parser(role, help=f"Run one session as the TCP {role}")
        net.add_argument("--items", required=True, help="File with one element per line")
        net.add_argument("--host", default=DEFAULT_HOST)
        net.add_argument("--port", type=int, default=DEFAULT_PORT)
        net.add_argument("--timeout", type=float, default=SOCKET_TIMEOUT,
                         help="Socket timeout in seconds")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format=LOG_FORMAT)
    try:
        if args.command == "demo":
            run_demo(args.alice, args.bob)
        else:
            run_network(args.command, args.items, args.host, args.port, args.timeout)
    except (PsiError, WireFormatError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
