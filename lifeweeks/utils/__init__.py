"""Utility modules for the Life in Weeks service."""
