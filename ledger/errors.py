# ledger/errors.py
class LedgerError(Exception):
    """Base ledger error."""
    def __init__(self, msg: str = "", **ctx):
        super().__init__(msg)
        self.msg = msg
        self.ctx = ctx

    def __str__(self):
        base = self.msg or self.__class__.__name__
        if self.ctx:
            details = ", ".join(f"{k}={v!r}" for k, v in self.ctx.items())
            return f"{base} [{details}]"
        return base

class ProtocolError(LedgerError):
    """Request bytes could not be turned into a Request."""

class MalformedRequest(ProtocolError):
    """Unknown method prefix, truncated input or unparseable amount."""

class EncodingError(ProtocolError):
    """Inspected bytes are not ASCII text where text is required."""

class InvalidAmount(LedgerError):
    """Delta or resulting balance is not a finite number."""
