"""Infrastructure adapters: database, repositories, gateway."""
