"""Core package for ocinstall."""
