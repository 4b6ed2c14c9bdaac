"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CONSECUTIVE_ABSENCE_THRESHOLD = 3
MONTHLY_ABSENCE_THRESHOLD = 5

TOP_ABSENTEES_LIMIT = 10
TOP_AT_RISK_COHORTS_LIMIT = 5
RANKING_LIMIT = 10
RECENT_SESSIONS_LIMIT = 10

UPCOMING_AGENDA_DAYS = 7

CSV_BOM = "\ufeff"

UNNAMED_PROGRAM = "No program"
