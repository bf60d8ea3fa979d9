"""Courier route planning service."""
