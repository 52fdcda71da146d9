class PsiError(Exception):
    """Base class for every error the PSI protocol raises."""


class EmptyInputError(PsiError):
    def __init__(self):
        super().__init__("Input data cannot be empty")


class InvalidBlindedPointsError(PsiError):
    """Peer-supplied points were rejected before any arithmetic ran on them."""

    def __init__(self, reason: str, indices=()):
        self.reason = reason
        self.indices = tuple(indices)
        if self.indices:
            reason = "%s (index %s)" % (reason, ", ".join(str(i) for i in self.indices))
        super().__init__("Invalid blinded points: %s" % reason)


class InvalidStateError(PsiError):
    def __init__(self, operation: str, state, detail: str = ""):
        self.operation = operation
        self.state = state
        msg = "cannot %s in state %s" % (operation, getattr(state, "name", state))
        if detail:
            msg += ": " + detail
        super().__init__(msg)


class CryptoError(PsiError):
    def __init__(self, msg: str):
        super().__init__("Cryptographic error: %s" % msg)


class InvalidEncodingError(CryptoError):
    """Bytes that do not decode to a valid P-256 group element."""
