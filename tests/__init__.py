"""
branded-schema test suite.

This package contains:
- unit/: Unit tests, one module per component
- conftest.py: Shared registry fixtures
"""
