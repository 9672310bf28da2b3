"""Scoped throttles shared by the inventory apps.

Rates are looked up from Django settings at request time, so tests using
override_settings reliably affect them.
"""

from django.conf import settings
from rest_framework.permissions import SAFE_METHODS
from rest_framework.throttling import ScopedRateThrottle


class SettingsScopedRateThrottle(ScopedRateThrottle):
    def get_rate(self):
        rf = getattr(settings, "REST_FRAMEWORK", {})
        rates = rf.get("DEFAULT_THROTTLE_RATES", {})
        return rates.get(self.scope)


class WriteScopedRateThrottle(SettingsScopedRateThrottle):
    """Throttle only mutating requests; reads pass through."""

    def allow_request(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().allow_request(request, view)
