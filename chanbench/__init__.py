"""Throughput benchmarks for bounded async message channels on asyncio and trio."""

__version__ = "0.2.0"