"""filedeck - filesystem operation engine.

Lists, searches, copies, moves and watches directory trees with retry
handling for transient I/O failures.
"""

__version__ = "0.1.0"
