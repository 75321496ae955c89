"""
TABLEFORGE shared engine: column types, validators, table parsing and edit sessions
"""

__version__ = "0.1.0"
