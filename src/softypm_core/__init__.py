"""SoftYPM core - story workflow model, schemas and configuration."""

__version__ = "1.0.0"
