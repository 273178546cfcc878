"""Background workers: dramatiq actors and the settlement scheduler."""
