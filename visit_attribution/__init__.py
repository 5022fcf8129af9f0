"""
Visit attribution - traffic source resolution and two-slot visit ledger.

The library is silent unless the host application configures logging.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
