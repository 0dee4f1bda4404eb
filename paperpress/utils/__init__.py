"""Utility helpers for PaperPress."""
