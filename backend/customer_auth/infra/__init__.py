"""Concrete adapters implementing the service-layer ports."""
