from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional

from .core import Command, FallingBlocksGame, GameConfig, StepResult
from .interfaces import InputSource, Renderer


logger = logging.getLogger(__name__)


class SchedulerError(RuntimeError):
    """A driver thread died with an unexpected exception."""


class GameScheduler:
    """Runs the gravity driver and the input driver against one game.

    Both drivers take `self.lock` for exactly one transition (one tick or one
    command) and never while sleeping. They stop cooperatively once the game
    is over or `stop()` has been called.
    """

    def __init__(
        self,
        game: FallingBlocksGame,
        input_source: InputSource,
        renderer: Optional[Renderer] = None,
        config: Optional[GameConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.game = game
        self.input_source = input_source
        self.renderer = renderer
        self.config = config or game.config
        self.clock = clock
        self.sleep = sleep
        self.lock = threading.Lock()
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []
        self._errors: List[BaseException] = []

    @property
    def gravity_interval(self) -> float:
        return self.config.gravity_interval_ms / 1000.0

    @property
    def poll_interval(self) -> float:
        return self.config.poll_interval_ms / 1000.0

    @property
    def input_poll_interval(self) -> float:
        return self.config.input_poll_interval_ms / 1000.0

    def should_stop(self) -> bool:
        return self._stop.is_set() or self.game.game_over

    # -- transitions -------------------------------------------------------

    def tick(self) -> StepResult:
        with self.lock:
            before = self._piece_copy()
            result = self.game.tick()
            self._publish(before, result)
            return result

    def submit(self, command: Command) -> StepResult:
        with self.lock:
            before = self._piece_copy()
            result = self.game.apply(command)
            self._publish(before, result)
            return result

    def redraw(self) -> None:
        with self.lock:
            if self.renderer is None:
                return
            self.renderer.render(self.game.grid.clone_state(), self.game.score)
            if self.game.current_piece is not None and not self.game.game_over:
                self.renderer.render_piece_overlay(self.game.current_piece.copy(), True)

    def _piece_copy(self):
        piece = self.game.current_piece
        return piece.copy() if piece is not None else None

    def _publish(self, before, result: StepResult) -> None:
        # Called with the lock held
        if self.renderer is None:
            return
        if result.locked:
            self.renderer.render(self.game.grid.clone_state(), self.game.score)
            if not result.game_over and self.game.current_piece is not None:
                self.renderer.render_piece_overlay(self.game.current_piece.copy(), True)
        elif result.moved or result.rotated:
            if before is not None:
                self.renderer.render_piece_overlay(before, False)
            self.renderer.render_piece_overlay(self.game.current_piece.copy(), True)

    # -- drivers -----------------------------------------------------------

    def _gravity_loop(self) -> None:
        last_drop = self.clock()
        while not self.should_stop():
            if self.clock() - last_drop >= self.gravity_interval:
                self.tick()
                last_drop = self.clock()
            self.sleep(self.poll_interval)

    def _input_loop(self) -> None:
        while not self.should_stop():
            command = self.input_source.try_next()
            if command is None:
                self.sleep(self.input_poll_interval)
                continue
            self.submit(command)

    def _guarded(self, target: Callable[[], None]) -> Callable[[], None]:
        def run() -> None:
            name = threading.current_thread().name
            logger.info("%s started", name)
            try:
                target()
            except Exception as exc:
                logger.exception("%s crashed", name)
                self._errors.append(exc)
                self._stop.set()
            finally:
                logger.info("%s stopped", name)

        return run

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("Scheduler already started")
        self._threads = [
            threading.Thread(target=self._guarded(self._gravity_loop), name="gravity-driver", daemon=True),
            threading.Thread(target=self._guarded(self._input_loop), name="input-driver", daemon=True),
        ]
        for thread in self._threads:
            thread.start()

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> None:
        for thread in self._threads:
            thread.join(timeout)
        if self._errors:
            raise SchedulerError("Game driver failed") from self._errors[0]

    def run(self) -> None:
        """Play until the game is over or `stop()` is called."""
        self.redraw()
        self.start()
        self.join()
