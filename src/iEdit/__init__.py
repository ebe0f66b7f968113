"""iEdit: in-page image editor core with a remote transformation pipeline."""

__version__ = "0.1.0"
