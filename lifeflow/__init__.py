"""
LifeFlow — blood donation registry, dashboard statistics and donation heuristics.
"""

from lifeflow.app import LifeFlowApp

__all__ = ["LifeFlowApp"]
