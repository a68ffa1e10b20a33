"""Operator tooling for BeeLert deployments."""
