"""dashfs Profile — read access to users, namespaces and memberships."""
