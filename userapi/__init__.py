"""userapi — minimal user-management REST API."""
