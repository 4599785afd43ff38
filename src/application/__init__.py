"""Application layer - Use cases and orchestration.

This layer reacts to host notifications by orchestrating domain logic:
- Commands: Handlers that change state (the opportunity total recompute)
- DTOs: Outcomes returned inside Success
- Errors: ApplicationError returned inside Failure

Structure:
- commands/handlers/: Command handlers (write operations)
- dtos/: Handler outcomes
- errors/: Application error types

The application layer orchestrates domain logic but contains no business rules.
"""
