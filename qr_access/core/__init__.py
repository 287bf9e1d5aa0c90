"""Configuration, logging and error primitives shared across the service."""
