"""
Thanos Finance

Gamified personal finance: transactions, habits, investments and goals,
six achievement stones, levels and ranks, and a conversational advisor.
"""

__version__ = "1.0.0"
