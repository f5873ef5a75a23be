"""Roll up raw event documents into per-key, per-interval summary documents."""

__version__ = "0.1.0"
