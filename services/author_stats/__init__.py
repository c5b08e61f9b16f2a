"""
Author Statistics Service for gitch.

This service is responsible for:
- Enumerating every commit object in a repository's object database
- Aggregating per-author commit counts and activity spans
- Ranking and rendering the per-author report
"""

__version__ = "0.1.0"
__author__ = "gitch contributors"
__description__ = "Per-author git contribution statistics"
