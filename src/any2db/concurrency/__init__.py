"""Concurrency — async pool for batch materialization."""

from any2db.concurrency.pool import ConcurrencyPool

__all__ = ["ConcurrencyPool"]
