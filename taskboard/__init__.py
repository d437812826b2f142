"""Taskboard Sync - persistence and synchronization layer for a kanban board."""

__version__ = "1.0.0"
