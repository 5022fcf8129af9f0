# visit-attribution - Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from visit_attribution.core.ports.clock import ClockPort
from visit_attribution.core.ports.page import PageContextPort
from visit_attribution.core.ports.storage import KeyValueStorePort

__all__ = [
    "ClockPort",
    "KeyValueStorePort",
    "PageContextPort",
]
