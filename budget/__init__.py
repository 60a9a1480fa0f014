"""
Budget - Source Package

Aggregates personal incomes and expenses into period reports,
combines independently recorded reports and stores them as
comma-separated rows.

DESIGN PRINCIPLES:
1. Money is integer cents, never floating point
2. Reports are immutable values - changing one means building a new one
3. Fail early, fail visibly (no partial reports)
4. Every step must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Team"
