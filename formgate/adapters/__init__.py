"""Adapters implementing core protocols."""
