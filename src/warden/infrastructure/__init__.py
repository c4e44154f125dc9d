"""Infrastructure layer for Warden."""
