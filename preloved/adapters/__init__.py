"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (marketplace REST
    endpoints, the external session provider, local key/value storage, and
    the in-memory offline backend) used by use cases.

Dependencies:
    REST submodules depend on ``requests``; storage depends on the local
    filesystem only.

Call context:
    Imported by ``preloved.app.controller`` for runtime wiring and by tests
    for transport-level behavior verification.
"""
