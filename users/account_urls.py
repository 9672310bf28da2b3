"""Account route for the authenticated user's profile."""

from django.urls import path

from .views import current_user

urlpatterns = [
    path("", current_user, name="profile"),
]
