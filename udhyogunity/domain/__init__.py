"""Domain layer: entities, enums and exceptions (no infrastructure imports)."""
