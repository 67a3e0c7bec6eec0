"""Pydantic request/response schemas.

Learn: Separate schemas for create/update/read keep the API clean, and
validation runs at the boundary before any handler logic. Validators
raise ValueError with a user-facing sentence; the error handler turns
those into the `errors` list of a 400 response.
"""
