# ledger/enums.py
from enum import Enum

class Method(Enum):
    READ = "read"
    UPDATE = "update"
