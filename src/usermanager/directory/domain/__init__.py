"""Domain layer for the directory bounded context."""
