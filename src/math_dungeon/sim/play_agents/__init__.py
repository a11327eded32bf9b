"""Simulated players for headless battle runs.

Re-exports the base class and the concrete agents so consumers can do::

    from math_dungeon.sim.play_agents import AnswerAgent, AccuracyAgent
"""

from .accuracy_agent import AccuracyAgent
from .base import AnswerAgent

__all__ = ["AccuracyAgent", "AnswerAgent"]
