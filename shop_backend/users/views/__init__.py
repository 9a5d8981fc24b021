from .accounts import (
    ChangePasswordView,
    DeactivateView,
    ProfilePictureView,
    ProfileView,
    UserListView,
)
from .auth import LoginView, RegisterView
from .me import MeView

__all__ = [
    "ChangePasswordView",
    "DeactivateView",
    "LoginView",
    "MeView",
    "ProfilePictureView",
    "ProfileView",
    "RegisterView",
    "UserListView",
]
