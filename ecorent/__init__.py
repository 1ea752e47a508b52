"""
Eco-Rent backend root package.

This package contains the FastAPI app entry point (main.py), API routes,
domain logic (devices, ownership, events), application services and
infrastructure adapters (MongoDB, S3 object storage).
"""
