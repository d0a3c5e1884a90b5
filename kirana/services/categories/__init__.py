"""Vendor-managed product categories."""
