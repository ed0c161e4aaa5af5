"""HTTP API (health endpoint)."""
