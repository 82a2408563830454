"""JSON-backed state stores."""
