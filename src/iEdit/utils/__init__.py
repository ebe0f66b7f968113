"""Small shared helpers (logging, JSON I/O)."""
