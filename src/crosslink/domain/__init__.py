"""Domain layer: entities, pure link/matching services and ports."""
