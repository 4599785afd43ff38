"""Domain layer - Pure business logic.

This layer contains the core business entities, value objects, protocols
(ports), and domain events. The domain layer has NO dependencies on any
framework or infrastructure - it is pure Python.

Structure:
- entities/: Domain entities (typed snapshots of store records)
- value_objects/: Value objects (immutable, no identity)
- protocols/: Domain protocols (record store, logger)
- services/: Domain services (won-total calculation)
- events/: Domain events (host change notifications)

The domain layer defines WHAT the business does, not HOW it's implemented.
"""
