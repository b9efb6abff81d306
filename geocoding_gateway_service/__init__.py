"""Geocoding Gateway Service."""
