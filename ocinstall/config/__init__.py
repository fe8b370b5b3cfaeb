"""Config package for ocinstall."""
