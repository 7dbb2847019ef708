"""Request handling utilities."""
