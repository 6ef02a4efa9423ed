from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from .palette import color_for_value


INFO_BAR_BG = (80, 80, 80)
INFO_BAR_FG = (220, 220, 220)


class Renderer:
    def __init__(self, cell_size: int = 24, bar_height: int = 24) -> None:
        self.cell_size = cell_size
        self.bar_height = bar_height

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return width * self.cell_size, height * self.cell_size + self.bar_height

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                color = color_for_value(int(state[y, x]))
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color, rect)
        return surf

    def draw_info_bar(
        self, screen: pygame.Surface, font: pygame.font.Font, paused: bool, lines: int, speed: int
    ) -> None:
        width = screen.get_width()
        screen.fill(INFO_BAR_BG, pygame.Rect(0, 0, width, self.bar_height))

        center = "PAUSED" if paused else "[Space] to pause, [C] to clear"
        texts = [
            (f"Speed: {speed}", "left"),
            (center, "center"),
            (f"Lines: {lines} ", "right"),
        ]
        for text, anchor in texts:
            img = font.render(text, True, INFO_BAR_FG)
            rect = img.get_rect(centery=self.bar_height // 2)
            if anchor == "left":
                rect.left = 4
            elif anchor == "center":
                rect.centerx = width // 2
            else:
                rect.right = width - 4
            screen.blit(img, rect)

    def draw(
        self,
        screen: pygame.Surface,
        state: np.ndarray,
        font: Optional[pygame.font.Font] = None,
        paused: bool = False,
        lines: int = 0,
        speed: int = 0,
    ) -> None:
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(state), (0, self.bar_height))
        if font is not None:
            self.draw_info_bar(screen, font, paused, lines, speed)
