"""Test doubles for remote tool servers."""
