"""Video processing feature: service, schemas and routes."""
