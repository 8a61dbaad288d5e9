"""Assertion orchestration: failures, contexts, configuration and source capture."""
