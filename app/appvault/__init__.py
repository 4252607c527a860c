"""appvault - import, store and catalog signed iOS application archives."""

__version__ = "0.3.0"
