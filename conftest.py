"""
Root conftest - shared pytest configuration and fixtures.
Ensures the ecorent package is importable when running pytest from the repo root
without an editable install.
"""
import sys
from pathlib import Path

# Ensure repo root is in path for 'from ecorent...' imports
_root = Path(__file__).resolve().parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))
