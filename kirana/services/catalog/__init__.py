"""Product catalog and vendor inventory."""
