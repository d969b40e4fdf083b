"""Execution collaborators for concrete database drivers."""
