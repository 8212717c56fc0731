"""HTTP server for notion2view."""
