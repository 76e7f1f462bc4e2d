"""Multi-tenant aviation maintenance (MRO) service."""

__version__ = "1.0.0"
