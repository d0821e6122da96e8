"""Wrappers around external collaborators (credentials, object storage) and logging."""
