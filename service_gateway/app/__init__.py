"""
API Gateway Service package for the address lookup access layer.

The gateway fronts client requests:
- Public HTTP+JSON routes under /api translated to internal RPC calls
- The caller's Authorization header forwarded verbatim as call metadata
- Backend error kinds mapped to HTTP status codes

Structure:
- app.main: FastAPI app, routes, and error rendering.
- app.adapters: RPC clients for internal services.
- app.domain: Request parsing and the authorization check.
"""
