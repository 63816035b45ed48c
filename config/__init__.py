"""Kiosk configuration."""
