"""API routes package"""

from . import health, plans, analysis, distribution, substitutions, suggestions, versions

__all__ = ["health", "plans", "analysis", "distribution", "substitutions", "suggestions", "versions"]
