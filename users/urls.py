"""Aggregate user namespaces under /api/v1/.

Re-exports the "auth", "account" and "users" URLconfs so the project can
include a single users URL entry point without duplicating route definitions.
"""

from django.urls import include, path

urlpatterns = [
    path("auth/", include("users.auth_urls")),
    path("account/profile/", include("users.account_urls")),
    path("users/", include("users.admin_urls")),
]
