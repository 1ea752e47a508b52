"""
API layer for the Eco-Rent backend.

Exposes the device endpoints under /api/devices.
"""
