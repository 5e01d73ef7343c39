"""
Table Roller - rolls on hand-written markdown random tables.

Parses list-style and range-style tables, rolls on them with the dice
their header names, and resolves references to other tables.
"""

__version__ = "0.2.0"
