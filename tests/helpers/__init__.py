"""Test helper modules for the DocDoc test suite.

- file_utils: document tree builders
- cache_utils: cache/logging reset for test isolation
- observers: in-memory watchdog observer for subscription tests
- cli: subprocess runner for command modules
"""
