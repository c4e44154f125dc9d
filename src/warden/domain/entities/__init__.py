"""Domain entities for Warden."""

from warden.domain.entities.page import Page, check_page_bounds
from warden.domain.entities.user import LoginResult, UserProfile

__all__ = [
    "LoginResult",
    "Page",
    "UserProfile",
    "check_page_bounds",
]
