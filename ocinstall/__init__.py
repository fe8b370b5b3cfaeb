"""ocinstall - install-lifecycle file handling for OpenCart packages."""

import logging

__version__ = "0.2.0"

# Silent unless the application configures handlers.
logging.getLogger("ocinstall").addHandler(logging.NullHandler())
