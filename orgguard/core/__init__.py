"""Core configuration, logging, DI container and authorization."""
