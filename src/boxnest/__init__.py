"""boxnest: layout and constraint engine for nested rectangle diagrams."""

__version__ = "0.1.0"
