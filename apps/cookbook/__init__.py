# -*- coding: utf-8 -*-
"""Cookbook web service package.

- Backend: FastAPI (ASGI)
- Data: scraped recipes.json + ingredients.json (normalized by core/)
- Output: JSON view models for a table UI (no HTML rendering here)
"""

__all__ = ["__version__"]
__version__ = "0.3.0"
