"""
Ledger Engine - Source Package

The core of a single-user bookkeeping app: accounts with running
balances, an append-only entry log, per-account statements and
category budget monitoring.

DESIGN PRINCIPLES:
1. Money is integer minor units, never floats
2. One owner mutates the dataset, one command at a time
3. A stored balance must always be reproducible from its entries
4. Rejections are values, not exceptions
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Ledger Engine Team"
