"""
fleetdesk/validators package marker.
"""

from fleetdesk.validators.dates import parse_calendar_date, to_calendar_date
from fleetdesk.validators.row_validator import ImportRowValidator

__all__ = [
    "ImportRowValidator",
    "parse_calendar_date",
    "to_calendar_date",
]
