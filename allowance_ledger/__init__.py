"""
Allowance Ledger - Source Package

A personal allowance/expense ledger: dated, signed amounts with a memo,
kept in one text blob and summed into a running total.

DESIGN PRINCIPLES:
1. Nothing is stored without passing validation
2. Memory and storage never diverge; a failed save rolls back
3. The UI gets read-only snapshots and calls explicit operations
4. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Allowance Ledger Team"
