"""
Pocket Ledger - Source Package

Profile-scoped persistence and ledger accounting for a personal
habit-and-finance tracker.

DESIGN PRINCIPLES:
1. Every balance change comes from a command on the store
2. Validation failures are loud, persistence failures are logged
3. In-memory state is authoritative for the session
4. Every command is audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Pocket Ledger Team"
