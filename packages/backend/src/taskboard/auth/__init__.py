"""Authentication and authorization.

Learn: Users register with email/password and receive a JWT bearer
token. Protected routes resolve the token to a CurrentUser through the
dependencies in taskboard.auth.dependencies. Tokens are stateless —
there is no server-side session table and no revocation.
"""
