"""dashfs Engine — Errors, configuration, logging, cache, runtime wiring."""
