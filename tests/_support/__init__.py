"""
Test support utilities for ticktock tests.

Helpers that are not fixtures but are shared across test files.
"""
