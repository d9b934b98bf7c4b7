"""DTOs returned by application services and use cases."""
