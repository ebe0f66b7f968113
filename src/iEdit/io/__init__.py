"""Readers and writers for data embedded in host documents."""
