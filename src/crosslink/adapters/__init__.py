"""Adapters connecting the domain ports to infrastructure."""
