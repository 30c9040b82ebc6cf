"""Pydantic models for assessments and request bodies."""
