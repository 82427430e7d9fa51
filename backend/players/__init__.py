"""
Automatic players for the Snake engine (headless runs and demos).
"""

from .base import Player
from .autopilot import AutopilotPlayer

__all__ = [
    'Player',
    'AutopilotPlayer',
]
