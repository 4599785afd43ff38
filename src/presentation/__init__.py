"""Presentation layer - Host-facing entry points.

Two entry points run the same application handler:
- plugin/: In-process plugin invoked by the host with its own record store
- routers/: FastAPI service endpoint (webhook) the host calls over HTTP

Both are thin - they convert the host's notification into a QuoteChangeEvent,
dispatch it to the application layer, and translate the Result into what the
host understands (an exception, or a non-2xx response).

The presentation layer depends on the application layer but contains NO
business logic.
"""
