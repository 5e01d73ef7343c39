"""Standalone helpers for preparing table files."""
