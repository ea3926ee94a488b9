"""Canned payloads shared by the test suite."""
