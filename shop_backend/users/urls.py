# users/urls.py

from django.urls import path

from .views import (
    ChangePasswordView,
    DeactivateView,
    LoginView,
    MeView,
    ProfilePictureView,
    ProfileView,
    RegisterView,
    UserListView,
)

app_name = "users"

auth_urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
]

urlpatterns = [
    # ---------------- AUTHENTICATED ----------------
    path("", UserListView.as_view(), name="list"),
    path("me/", MeView.as_view(), name="me"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("password/", ChangePasswordView.as_view(), name="password"),
    path("deactivate/", DeactivateView.as_view(), name="deactivate"),
    path("profile-picture/", ProfilePictureView.as_view(), name="profile-picture"),
]
