"""HTTP API for course export archives."""
