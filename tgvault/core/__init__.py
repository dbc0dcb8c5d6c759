"""Core infrastructure: configuration, logging, owner resolution."""
