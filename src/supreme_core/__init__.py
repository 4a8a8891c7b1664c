"""
supreme_core - Shared enums and pure data models for the Supreme dashboard.
"""
