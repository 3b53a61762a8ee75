"""Domain layer - booth code entities, services and errors."""
