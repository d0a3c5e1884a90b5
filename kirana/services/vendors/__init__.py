"""Vendor store profile and settings."""
