"""FastAPI application for the journal reflection service."""
