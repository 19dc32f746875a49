"""
FinCore Ledger

A single-process banking ledger with session-based authorization, exact
Decimal balances and a pluggable identity repository.
"""

__version__ = "1.0.0"
