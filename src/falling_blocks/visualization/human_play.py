from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict, Optional, Sequence

import pygame

from falling_blocks.game import Driver, GameConfig
from .renderer import Renderer


FRAME_MS = 20

KEY_COMMANDS: Dict[int, Callable[[Driver], object]] = {
    pygame.K_LEFT: lambda d: d.nudge(-1, vertical=False),
    pygame.K_RIGHT: lambda d: d.nudge(1, vertical=False),
    pygame.K_DOWN: lambda d: d.nudge(1, vertical=True),
    pygame.K_UP: lambda d: d.rotate(),
    pygame.K_SPACE: lambda d: d.toggle_pause(),
    pygame.K_c: lambda d: d.clear(),
}

CHAR_COMMANDS: Dict[str, Callable[[Driver], object]] = {
    "+": lambda d: d.speed_up(),
    "-": lambda d: d.slow_down(),
}

QUIT_KEYS = (pygame.K_ESCAPE, pygame.K_RETURN, pygame.K_KP_ENTER)


def is_quit_key(event: pygame.event.Event) -> bool:
    if event.key in QUIT_KEYS:
        return True
    return event.key == pygame.K_c and bool(getattr(event, "mod", 0) & pygame.KMOD_CTRL)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks in a pygame window.")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--state", type=str, default="state.json",
                   help="File the game is restored from and autosaved to")
    p.add_argument("--no-save", action="store_true", help="Neither restore nor autosave")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=24)
    return p


def config_from_args(args: argparse.Namespace) -> GameConfig:
    return GameConfig(
        width=args.width,
        height=args.height,
        random_seed=args.seed,
        state_path=None if args.no_save else args.state,
        autosave=not args.no_save,
    )


def handle_key(driver: Driver, event: pygame.event.Event) -> bool:
    """Apply the key to the driver. Returns False when the key quits the game."""
    if is_quit_key(event):
        return False
    command = KEY_COMMANDS.get(event.key)
    if command is None:
        command = CHAR_COMMANDS.get(getattr(event, "unicode", ""))
    if command is not None:
        command(driver)
    return True


def run(config: Optional[GameConfig] = None, cell_size: int = 24) -> None:
    pygame.init()
    try:
        driver = Driver(config)
        renderer = Renderer(cell_size=cell_size)
        grid = driver.session.grid
        screen = pygame.display.set_mode(renderer.window_size(grid.width, grid.height))
        pygame.display.set_caption("Falling Blocks")
        font = pygame.font.SysFont(None, 22, bold=True)
        clock = pygame.time.Clock()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and not handle_key(driver, event):
                    running = False

            state = driver.tick()
            renderer.draw(screen, state, font, driver.paused, driver.lines_cleared, driver.speed)
            pygame.display.flip()
            clock.tick(1000 // FRAME_MS)
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    run(config_from_args(args), cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
