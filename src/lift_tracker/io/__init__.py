"""Plan persistence, serialization and document import."""
