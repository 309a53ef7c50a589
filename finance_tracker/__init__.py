"""
Finance Tracker - Source Package

A personal finance tracker for income/expense transactions,
peer-to-peer loans and monthly budgets.

DESIGN PRINCIPLES:
1. Summaries are pure functions of the current records
2. Loan status is always derived, never trusted
3. No silent corrections at the model boundary
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
