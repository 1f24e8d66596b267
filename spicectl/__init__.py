"""spicectl — drive the spicetify CLI through its install/apply lifecycle."""

__version__ = "0.1.0"
