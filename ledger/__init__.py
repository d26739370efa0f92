# ledger/__init__.py
"""
Balance ledger package.

Provides:
- Server settings built from config.yaml
- Request/response models and the method enum
- The error taxonomy for protocol and store failures
- BalanceStore, the single lock-guarded balance shared by all connections
"""
