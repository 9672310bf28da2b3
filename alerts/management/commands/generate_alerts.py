"""Scan products and raise low-stock alerts.

Meant to be scheduled (cron, systemd timer) alongside the on-demand
`POST /api/v1/alerts/generate/` endpoint.

Usage:
    python manage.py generate_alerts
"""

from alerts.services import generate_alerts
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Create alerts for active products whose stock is below their reorder level"

    def handle(self, *args, **options):
        created = generate_alerts()
        self.stdout.write(self.style.SUCCESS(f"Generated {len(created)} new alerts."))
