"""Benchmark data seeding."""
