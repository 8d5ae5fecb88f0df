"""Placeholder auth service. For now it only rolls dice."""
