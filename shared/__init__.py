"""
Shared utilities for the address lookup access layer.

This package aggregates common building blocks consumed by all services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- tracing: OpenTelemetry tracing config
- errors: Canonical error kinds and responses
- rpc: Internal RPC client and call context
- contracts: Wire models of the internal RPC surface
- circuit_breaker: Fail-fast protection for external calls

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/.
"""
