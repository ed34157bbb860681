from __future__ import annotations

import argparse
import logging
import threading
from typing import Dict, List, Optional

import pygame

from falling_blocks.game import Command, GameConfig, QueueInputSource, run_sessions
from .renderer import PygameRenderer


logger = logging.getLogger(__name__)


KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_UP: Command.ROTATE,
    pygame.K_ESCAPE: Command.QUIT,
    pygame.K_r: Command.RESTART,
}


class PygameInputSource(QueueInputSource):
    """Keyboard commands collected on the main thread, drained by the input driver."""

    def handle_event(self, event: pygame.event.Event) -> Optional[Command]:
        if event.type != pygame.KEYDOWN:
            return None
        command = KEY_TO_COMMAND.get(event.key)
        if command is not None:
            self.push(command)
        return command


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Falling blocks puzzle game")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--gravity-ms", type=int, default=500)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def handle_events(events, input_source: PygameInputSource, shutdown: threading.Event) -> None:
    """Feed pygame events to the input source; closing the window quits."""
    for event in events:
        if event.type == pygame.QUIT:
            shutdown.set()
            input_source.push(Command.QUIT)
        else:
            input_source.handle_event(event)


def run(config: Optional[GameConfig] = None, cell_size: int = 28) -> int:
    config = config or GameConfig()
    errors: List[BaseException] = []
    pygame.init()
    try:
        renderer = PygameRenderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.size)
        pygame.display.set_caption("Falling Blocks")
        clock = pygame.time.Clock()

        input_source = PygameInputSource()
        shutdown = threading.Event()

        def play() -> None:
            try:
                run_sessions(input_source, renderer, config, shutdown=shutdown)
            except Exception as exc:
                logger.exception("Game session crashed")
                errors.append(exc)

        worker = threading.Thread(target=play, name="session", daemon=True)
        worker.start()

        while worker.is_alive():
            handle_events(pygame.event.get(), input_source, shutdown)
            renderer.blit(screen)
            pygame.display.flip()
            clock.tick(60)
        worker.join()
    finally:
        pygame.quit()
    return 1 if errors else 0


def main() -> int:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level, format="[FALLING_BLOCKS] %(asctime)s %(threadName)s - %(message)s")
    config = GameConfig(random_seed=args.seed, gravity_interval_ms=args.gravity_ms)
    return run(config, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
