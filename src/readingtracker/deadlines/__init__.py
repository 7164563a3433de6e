"""Reading deadline tracking.

Derives progress, required pace, user pace and urgency from append-only
progress and status histories.
"""

__version__ = "0.1.0"
