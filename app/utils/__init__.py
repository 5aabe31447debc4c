# Utilities package
from .clock import Clock, utc_now, ensure_aware, age_seconds
from .pagination import paginate, OffsetPage

__all__ = [
    "Clock",
    "utc_now",
    "ensure_aware",
    "age_seconds",
    "paginate",
    "OffsetPage",
]
