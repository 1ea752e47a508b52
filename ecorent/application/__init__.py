"""Application layer: DTOs and the services that orchestrate domain operations."""
