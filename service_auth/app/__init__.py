"""
Auth Service package for the address lookup access layer.

This package exposes the internal RPC service that registers accounts,
logs them in and validates bearer tokens:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.validation: HS256 token issuing and validation.
- app.adapters: RPC client for the User service.

Design notes:
- Keep the package import side-effects minimal; module import must not
  perform network calls. All IO should happen in route handlers or
  explicit startup hooks.
- Use the shared/ utilities for logging, metrics, tracing, and errors.
- The service is stateless; accounts live in the User service.
"""
