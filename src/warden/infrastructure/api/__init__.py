"""HTTP API for Warden."""
