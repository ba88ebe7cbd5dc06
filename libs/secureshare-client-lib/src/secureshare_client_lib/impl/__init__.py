"""Concrete implementations."""
