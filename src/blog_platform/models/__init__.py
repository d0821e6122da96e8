"""Pydantic request, response and document models."""
