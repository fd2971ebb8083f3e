"""HTTP API for the browser UI."""
