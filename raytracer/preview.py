"""
pygame window for looking at a rendered canvas.

Controls:
  ESC / window close  -> exit
"""

from typing import Optional

import pygame

from raytracer.canvas import Canvas


def canvas_to_surface(canvas: Canvas) -> pygame.Surface:
    """
    Canvas -> pygame Surface.

    pygame's surfarray indexes pixels as [x, y, rgb] while the canvas is
    [y, x, rgb], hence the axis swap.
    """
    return pygame.surfarray.make_surface(canvas.to_array().swapaxes(0, 1))


def show(canvas: Canvas, title: str = "raytracer", max_frames: Optional[int] = None):
    """
    Open a window sized to the canvas and display it until closed.

    max_frames bounds the event loop (None = run until the user quits).
    """
    pygame.init()
    try:
        screen = pygame.display.set_mode((canvas.width, canvas.height))
        pygame.display.set_caption(f"{title} ({canvas.width}x{canvas.height}) | ESC exit")
        image = canvas_to_surface(canvas)
        clock = pygame.time.Clock()

        frames = 0
        running = True
        while running:
            clock.tick(30)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False

            screen.blit(image, (0, 0))
            pygame.display.flip()

            frames += 1
            if max_frames is not None and frames >= max_frames:
                running = False
    finally:
        pygame.quit()
