"""Infrastructure layer for the Customer bounded context."""
