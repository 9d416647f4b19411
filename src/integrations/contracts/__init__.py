"""
Contracts (data models).

This folder defines the request/response shapes for external integrations:
- Quote request payload (camelCase wire format posted by the intake wizard)
- Training progress rows

Both mock and real HTTP clients should use these contracts.
"""
