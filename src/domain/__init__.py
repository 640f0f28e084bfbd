"""Domain layer - Pure business logic.

This layer contains the core business entities and protocols (ports). The
domain layer has NO dependencies on any framework or infrastructure - it is
pure Python.

Structure:
- entities/: Domain entities (mutable, have identity)
- protocols/: Domain protocols (repository interfaces, service interfaces)
"""
