"""Chromatask CLI - styled personal tasks with tags and subtasks."""

__version__ = "0.4.0"
