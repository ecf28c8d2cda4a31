"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200

DEFAULT_SORT_FIELD = "check_in_millis"
SORTABLE_FIELDS = ("id", "check_in_millis", "check_out_millis")
