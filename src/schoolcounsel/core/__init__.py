"""Core infrastructure: configuration-bound database, models, schemas, security."""
