"""Shipment persistence backends."""
