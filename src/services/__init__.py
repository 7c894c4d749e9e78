"""Service layer: database operations scoped to the calling user."""
