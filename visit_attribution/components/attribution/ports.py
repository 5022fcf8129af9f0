"""
Attribution component - Port interfaces.

The component reads the page through PageContextPort, persists through
KeyValueStorePort and stamps records through ClockPort.
"""

from visit_attribution.core.ports import ClockPort, KeyValueStorePort, PageContextPort

__all__ = [
    "ClockPort",
    "KeyValueStorePort",
    "PageContextPort",
]
