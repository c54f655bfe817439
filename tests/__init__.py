"""
Test suite for habit-tracker.

This package contains:
- Unit tests for the streak and success-rate calculator
- Repository tests against a temporary JSON store
- Command and CLI tests, including end-to-end runs in an isolated home
"""
