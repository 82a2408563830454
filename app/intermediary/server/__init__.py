"""Admin HTTP server."""
