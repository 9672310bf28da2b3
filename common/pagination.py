from django.conf import settings
from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 200


class LedgerPagination(DefaultPagination):
    page_size = getattr(settings, "LEDGER_DEFAULT_PAGE_SIZE", 50)
