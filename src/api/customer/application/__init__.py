"""Application layer for the Customer bounded context."""
