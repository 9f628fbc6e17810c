"""
AgentDeck Application Package

This package contains the core application modules including:
- api: FastAPI dashboard and catalog endpoints
- cache: Bounded, expiring per-invocation context cache
- core: Invocation handling, background timers and process lifecycle
- registry: Markdown-defined agent catalog
- stats: Concurrent usage statistics and their persistence
- tests: Test suites
"""
