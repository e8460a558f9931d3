"""
Top-level package marker for go2schema.

This allows tests and callers to import modules such as
`go2schema.src.schema.translator`.
"""

from .src import *  # re-export for convenience
