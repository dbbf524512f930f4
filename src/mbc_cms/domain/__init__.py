"""Domain layer for the MBC CMS API."""
