"""
Estimathon Leaderboard - Core Package

This package contains the core modules for:
- Submission scoring and ranking (estimathon.scoring)
- Submission and answer key ingestion (estimathon.ingestion)
- The refresh pipeline (estimathon.leaderboard)
- Shared configuration and utilities
"""

from estimathon.config import *
