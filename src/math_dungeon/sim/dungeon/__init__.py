"""Curriculum lookup: grades, units and problem banks."""

from .curriculum import BankedProblem, Curriculum, GradeEntry, default_curriculum

__all__ = ["BankedProblem", "Curriculum", "GradeEntry", "default_curriculum"]
