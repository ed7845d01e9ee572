"""Shared helpers for shelldb."""
