from __future__ import annotations

import logging

from .models import COLOR_COUNT, Config, Cycle, State

logger = logging.getLogger(__name__)


def config_is_valid(config: Config) -> bool:
    if config.draws_per_cycle == 0 or config.draws_per_color == 0:
        return False
    return config.draws_per_cycle == config.draws_per_color * COLOR_COUNT


def cycle_is_balanced(cycle: Cycle, config: Config) -> bool:
    """Draws made plus draws remaining must add up to the cycle size."""
    return cycle.draws_made() + cycle.remaining_draws.total() == config.draws_per_cycle


def validate_state(state: State) -> bool:
    """Check the logical consistency of an already decoded state.

    Only reports whether the state is usable, not which rule failed. Never
    modifies ``state``.
    """
    if not config_is_valid(state.config):
        logger.debug("Invalid config: %s", state.config)
        return False
    if not cycle_is_balanced(state.current_cycle, state.config):
        logger.debug("Draw counts do not add up for cycle %s", state.current_cycle.id)
        return False
    if not state.available_prizes:
        logger.debug("Prize catalog is empty")
        return False
    return True
