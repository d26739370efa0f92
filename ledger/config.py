# ledger/config.py
import math
from dataclasses import dataclass
from typing import Any, Mapping

# "POST /" must fit in the read window for an update to carry any amount
MIN_READ_BUFFER = 7


@dataclass
class ServerSettings:
    """Balance server runtime configuration."""
    host: str = "127.0.0.1"
    port: int = 8181

    read_buffer_size: int = 16     # bytes read once per connection
    max_amount_len: int = 10       # longest numeric run accepted after "POST /"
    initial_balance: float = 0.0

    def __post_init__(self) -> None:
        if self.read_buffer_size < MIN_READ_BUFFER:
            raise ValueError(f"read_buffer_size must be >= {MIN_READ_BUFFER}, got {self.read_buffer_size}")
        if self.max_amount_len < 1:
            raise ValueError(f"max_amount_len must be >= 1, got {self.max_amount_len}")
        if not 0 <= self.port <= 65535:
            raise ValueError(f"port out of range: {self.port}")
        if not math.isfinite(self.initial_balance):
            raise ValueError(f"initial_balance must be finite, got {self.initial_balance}")

    @classmethod
    def from_cfg(cls, cfg: Mapping[str, Any] | None) -> "ServerSettings":
        srv = (cfg or {}).get("server") or {}
        defaults = cls()

        # unset ${VAR} placeholders resolve to "", treat them as missing
        def pick(key: str):
            v = srv.get(key)
            return getattr(defaults, key) if v is None or v == "" else v

        return cls(
            host=str(pick("host")),
            port=int(pick("port")),
            read_buffer_size=int(pick("read_buffer_size")),
            max_amount_len=int(pick("max_amount_len")),
            initial_balance=float(pick("initial_balance")),
        )
