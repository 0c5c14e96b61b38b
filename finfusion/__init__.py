"""
FinFusion: wallet, brokerage and assistant core for the FinFusion client.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - wallet: Peer-to-peer transfers, simulated brokerage, financial assistant.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Executors, use cases, DTOs, orchestration.
    - infrastructure: Adapters (remote ledger backend, inference relay).
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
