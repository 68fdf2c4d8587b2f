"""Reflection — see what you wrote on this day in previous years.

Resolves daily and weekly periodic notes to the notes for the same
period one or more years earlier, and hands a preview of them to the
host's presentation layer.
"""

__version__ = "0.2.0"
