"""Domain services for Warden."""

from warden.domain.services.authentication_service import AuthenticationService
from warden.domain.services.authorization_service import AuthorizationService

__all__ = [
    "AuthenticationService",
    "AuthorizationService",
]
