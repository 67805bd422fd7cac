"""Core package: configuration, logging and the exception hierarchy."""
