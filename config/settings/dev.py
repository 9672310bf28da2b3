from decouple import config as _config

from .base import LOGGING as BASE_LOGGING
from .base import REST_FRAMEWORK as BASE_REST_FRAMEWORK
from .base import *  # noqa

DEBUG = True

# In dev, allow the browsable API and relaxed CORS
CORS_ALLOW_ALL_ORIGINS = True

# DJANGO_SQL_DEBUG=1 echoes every query, handy when checking row locks
LOGGING = {**BASE_LOGGING, "loggers": {**BASE_LOGGING["loggers"]}}
if _config("DJANGO_SQL_DEBUG", default=False, cast=bool):
    LOGGING["loggers"]["django.db.backends"] = {"handlers": ["console"], "level": "DEBUG", "propagate": False}

# Looser write throttles while iterating locally
REST_FRAMEWORK = {**BASE_REST_FRAMEWORK}
_rates = {**BASE_REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {})}
_rates.update(
    {
        "movements_write": "300/min",
        "alerts_write": "120/min",
    }
)
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = _rates
