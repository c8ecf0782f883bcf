"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Record Store collections
EMPLOYEES = "employees"
ATTENDANCE = "attendance"
AUTHORIZATIONS = "authorizations"
LEAVE_REQUESTS = "leave_requests"
OVERTIME_COMPENSATIONS = "overtime_compensations"
PAYROLL = "payroll"
APP_SETTINGS = "app_settings"
HOLIDAYS = "holidays"

DEFAULT_OVERTIME_RATE_MULTIPLIER = 1.0
MIN_PAYROLL_YEAR = 2000
DEFAULT_ANNUAL_LEAVE_BALANCE = 20
TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"
