"""
Remaining App - Period Budget Computation Engine

A personal budgeting engine that computes how much money remains available
in the current accounting period. Combines account balances, sinking-fund
buckets, predicted income and ignored transactions across currencies into a
single remaining figure.
"""

__version__ = "0.1.0"
__author__ = "Remaining Team"
