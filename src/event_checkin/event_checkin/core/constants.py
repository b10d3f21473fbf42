"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

WINNER_RANKS = (1, 2, 3)

# Header aliases accepted by the roster importer, in lookup order.
EMAIL_HEADERS = ("email", "Email")
FULL_NAME_HEADERS = ("full_name", "fullName", "Full Name", "name", "Name")
SCHOOL_HEADERS = ("school_institution", "schoolInstitution", "school", "School")

DEFAULT_SQLITE_PATH = "data/events.db"
DEFAULT_PUBLIC_BASE_URL = "http://localhost:5000"
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


# Marks "field not provided" in partial updates, distinct from an explicit None.
UNSET = _Unset()
