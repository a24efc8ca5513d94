"""Single-request-per-connection HTTP file server."""
