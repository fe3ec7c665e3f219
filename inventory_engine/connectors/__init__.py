"""
Connectors — everything that talks to the inventory REST backend.

Modules:
    normalize   — One tolerant parser for list responses (Ok | ParseError)
    api_client  — Synchronous client for every backend endpoint (requests)
    bundle      — Concurrent fetch of the report collections (httpx)
    poller      — Cancellable background refresh task
"""
