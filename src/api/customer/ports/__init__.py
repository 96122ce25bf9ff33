"""Ports (interfaces) for the Customer bounded context."""
