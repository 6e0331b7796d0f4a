"""Domain layer: entities, matching algorithms and repository contracts."""
