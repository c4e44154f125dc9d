"""Warden - account registration, login and role-based access control."""

__version__ = "0.1.0"

__all__ = ["__version__"]
