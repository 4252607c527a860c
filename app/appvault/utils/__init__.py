"""Utility modules for appvault."""
