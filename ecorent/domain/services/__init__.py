from .ownership_guard import authorize

__all__ = ["authorize"]
