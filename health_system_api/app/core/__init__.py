"""Core infrastructure: settings, logging, security, storage and the entity store."""
