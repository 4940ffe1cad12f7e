"""Orchestration, metrics and quality reporting for generated components."""
