"""
Geo Service package for the address lookup access layer.

Answers address search and reverse-geocode calls for authenticated
callers, reading through a shared cache to an external provider.

Structure:
- app.main: FastAPI app and RPC routes.
- app.engine: Authentication, cache keys and the cache-through flow.
- app.caching: Cache interface with Redis and in-memory backends.
- app.providers: Geocoding provider interface, DaData binding and a static fake.
- app.adapters: RPC client for the Auth service.

Design notes:
- The engine holds no cross-request state; every call validates its
  token with the Auth service.
- No retries. Provider and cache faults are classified, not repeated.
"""
