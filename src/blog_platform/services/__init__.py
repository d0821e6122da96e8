"""Business logic: identity, publishing, engagement, discovery and reconciliation."""
