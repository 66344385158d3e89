"""FastAPI application, schemas and routes."""
