"""Vendor dashboard analytics."""
