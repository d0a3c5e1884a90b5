"""Customer and vendor account profiles."""
