"""Utility helpers for dailytodo."""
