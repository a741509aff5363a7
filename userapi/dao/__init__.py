"""Data-access layer — one DAO per table."""
