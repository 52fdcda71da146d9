# Runtime defaults for the ecpsi tools
import os

# Domain separation tag for hash-to-curve; both parties must agree on it
HASH_TO_CURVE_DST = b"ECPSI-V01-CS01-with-P256_XMD:SHA-256_SSWU_RO_"

# TCP session defaults
DEFAULT_HOST = os.environ.get("ECPSI_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.environ.get("ECPSI_PORT", "7878"))
SOCKET_TIMEOUT = 30.0

# Element files: one element per line
ITEMS_ENCODING = "utf-8"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Wire frame limits: a compressed point is 66 hex chars, plus the line ending
MAX_WIRE_LINE = 68
MAX_WIRE_POINTS = 1 << 20
