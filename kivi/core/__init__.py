"""Core infrastructure: configuration, logging, exceptions, utilities."""
