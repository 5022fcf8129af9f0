# visit-attribution - Services (Functional Core)
# Pure attribution and ledger logic; no I/O
