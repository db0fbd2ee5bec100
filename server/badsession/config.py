from __future__ import annotations

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100

ROLE_ADMIN = "Admin"
ROLE_PLAYER = "Player"
ROLE_GUEST = "Guest"
USER_ROLES = (ROLE_ADMIN, ROLE_PLAYER, ROLE_GUEST)

EXPENSE_CATEGORIES = ("equipment", "venue", "maintenance", "other")

RECENT_ITEMS_LIMIT = 5
SEARCH_RESULTS_LIMIT = 10
TOP_CONTRIBUTORS_LIMIT = 10
SUMMARY_WINDOW_DAYS = 30

CHECK_IN_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
GUEST_FEE_NOTE = "Auto-recorded from guest check-in"
