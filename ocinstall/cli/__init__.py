"""CLI package for ocinstall."""
