"""Pydantic schemas: per-entity create / update / search / read variants and the HTTP envelope."""
