"""Account URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from modules.accounts.views import AdminUserViewSet, ProfileView, RegisterView

router = DefaultRouter(trailing_slash=True)
router.register("admin/users", AdminUserViewSet, basename="admin-user")

urlpatterns = [
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/me/", ProfileView.as_view(), name="profile"),
    *router.urls,
]
