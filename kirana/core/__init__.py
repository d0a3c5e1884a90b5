"""Core configuration, logging, security, and error primitives."""
