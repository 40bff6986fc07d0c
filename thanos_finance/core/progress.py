#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Progress and Leveling
Experience accumulation, level-ups and rank titles

Version: 1.0.0
Date: 2026-10-18
"""

from dataclasses import replace
from typing import Tuple
import logging

from thanos_finance.core.models import Progress, rank_for_level

logger = logging.getLogger(__name__)

def grant_experience(progress: Progress, xp: int) -> Tuple[Progress, bool]:
    """
    Apply one XP grant.

    A grant advances at most one level, however many thresholds the new total
    crosses. Returns the new progress and whether a level-up happened.
    """
    if xp <= 0:
        return progress, False

    experience = progress.experience + xp
    level = progress.level
    leveled_up = experience >= progress.next_level_threshold
    if leveled_up:
        level += 1

    updated = replace(progress, experience=experience, level=level)

    if leveled_up:
        logger.info(f"⬆️ Level up: {progress.level} -> {level} ({updated.rank_title}), {experience} XP")

    return updated, leveled_up
