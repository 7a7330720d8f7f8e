"""API package - HTTP boundary (routes, dependencies, middleware)."""
