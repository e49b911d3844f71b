"""dashfs Security — root-scoped authorization."""
