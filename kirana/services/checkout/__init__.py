"""Customer checkout and order history."""
