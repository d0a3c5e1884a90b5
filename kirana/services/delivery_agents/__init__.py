"""Vendor-scoped courier management."""
