from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from .core import Command, FallingBlocksGame, GameConfig
from .interfaces import InputSource, Renderer
from .scheduler import GameScheduler


logger = logging.getLogger(__name__)


def wait_for_restart(
    input_source: InputSource,
    poll_interval: float = 0.05,
    shutdown: Optional[threading.Event] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Block until the player restarts (True) or quits (False).

    Any other command is discarded.
    """
    while shutdown is None or not shutdown.is_set():
        command = input_source.try_next()
        if command == Command.RESTART:
            return True
        if command == Command.QUIT:
            return False
        if command is None:
            sleep(poll_interval)
    return False


def run_sessions(
    input_source: InputSource,
    renderer: Renderer,
    config: Optional[GameConfig] = None,
    game_factory: Optional[Callable[[GameConfig], FallingBlocksGame]] = None,
    shutdown: Optional[threading.Event] = None,
    **scheduler_kwargs,
) -> int:
    """Play games back to back until the player declines a restart.

    Returns the number of games played.
    """
    config = config or GameConfig()
    factory = game_factory or FallingBlocksGame
    played = 0
    while shutdown is None or not shutdown.is_set():
        game = factory(config)
        scheduler = GameScheduler(game, input_source, renderer, config, **scheduler_kwargs)
        played += 1
        logger.info("Starting game %d", played)
        scheduler.run()
        renderer.render_game_over(game.score)
        if not wait_for_restart(
            input_source,
            config.poll_interval_ms / 1000.0,
            shutdown,
            sleep=scheduler_kwargs.get("sleep", time.sleep),
        ):
            break
        logger.info("Restarting after score %d", game.score)
    return played
