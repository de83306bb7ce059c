"""Product catalog backend."""
