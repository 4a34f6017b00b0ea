"""CCPC compensation planner: salary vs. dividend projections for incorporated owners."""

__version__ = "0.1.0"
