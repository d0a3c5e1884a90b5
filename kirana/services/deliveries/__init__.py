"""Delivery lifecycle: assignment, status tracking, and persistence."""
