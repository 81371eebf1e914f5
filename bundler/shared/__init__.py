# bundler\shared\__init__.py
"""
Shared utilities package.

Cross-cutting concerns used by the core pipeline and its adapters:
- Configuration management
- Structured logging
- Tracing (Observability)
- Dependency Injection wiring
"""
