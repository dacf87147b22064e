"""Use-case layer for storefront workflows.

Each module coordinates domain objects and ports without performing transport
I/O directly; adapter failures leave this layer as ``UseCaseError``.
"""
