"""
auto-index - builds back-of-book term indexes for documentation.

Scans C and C++ sources for class, typedef, macro and function names (or
any construct a user-defined scanner describes) and combines them with the
terms listed in an index script.
"""

__version__ = "0.1.0"
