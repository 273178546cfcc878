"""Investment platform core."""
