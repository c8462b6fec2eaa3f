"""
User Service package for the address lookup access layer.

Owns the account store: creation with bcrypt-hashed passwords, lookup by
email with optional password verification, and paginated listing.

Structure:
- app.main: FastAPI app and RPC routes.
- app.passwords: bcrypt hashing off the event loop.
- app.persistence: PostgreSQL repository and an in-memory stand-in.
"""
