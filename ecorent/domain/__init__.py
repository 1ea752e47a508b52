"""Domain layer: entities, repository/gateway contracts and pure business rules."""
