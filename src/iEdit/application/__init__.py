"""Collaborator interfaces, DTOs and reference service implementations."""
