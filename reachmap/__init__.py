"""Reachability maps for robot arms: discretization, IK filtering, centering, display models and base placement."""

__version__ = "0.1.0"