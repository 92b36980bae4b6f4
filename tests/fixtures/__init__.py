"""Test fixtures for appswitch."""
