"""
employee_store.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment.
- The `logged` around-call interceptor.
"""

# Package marker.
