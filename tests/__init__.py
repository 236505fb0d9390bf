"""
timelog test suite.

This package contains:
- unit/: Unit tests (no external dependencies, in-memory store)
- integration/: Integration tests (real Redis, opt-in)
"""
