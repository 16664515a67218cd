"""
Kalshorb: AI advisor service for prediction-market traders.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - advisor: Intent classification, templated fallback replies,
      LLM-backed chat and quick actions.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, request dispatch.
    - infrastructure: Adapters (REST datastore, OpenRouter) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
