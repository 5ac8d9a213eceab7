"""
SimpleDB - Minimal Embedded Relational Store

Named tables of typed rows held in memory, one text file per table, and a
tiny CREATE/INSERT/SELECT command language to manipulate them.
"""

__version__ = "0.1.0"
