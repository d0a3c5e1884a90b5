"""Order lifecycle: status rules, persistence, and vendor operations."""
