"""Application services used by the REST routes."""
