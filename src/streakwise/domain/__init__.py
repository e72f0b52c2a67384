"""Domain layer: repository protocols consumed by services."""
