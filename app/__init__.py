"""Kolam upload gateway service."""
