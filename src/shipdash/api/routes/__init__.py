"""Route group exports."""

from . import form, health, shipments

__all__ = ["form", "health", "shipments"]
