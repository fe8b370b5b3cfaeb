"""Utils package for ocinstall."""
