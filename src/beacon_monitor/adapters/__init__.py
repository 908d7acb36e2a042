"""Adapters for the outside world."""
