"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- Record stores (Dataverse Web API, in-memory)
- Logging adapters (structlog console, host trace sink)

Structure:
- dataverse/: Dataverse Web API record store (httpx)
- persistence/: In-memory record store for development and tests
- logging/: LoggerProtocol adapters

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
