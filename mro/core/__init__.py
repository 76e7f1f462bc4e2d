"""Domain layer: entities, ports, exceptions and pure services."""
