"""Pydantic schemas package.

Folder intent:
  common.py   — CamelModel base, Money/Hours types and HealthResponse (all schemas inherit CamelModel)
  <module>.py — Create/Update inputs and Out records for one business module
"""
