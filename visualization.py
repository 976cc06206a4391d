# visualization.py
"""
Handles presenting the simulation's frame buffer using Pygame.

The Visualizer is the display shell: it owns the window and the raw RGBA
frame buffer, and it shows whatever the scene last rendered into it.
"""
import logging
import os

os.environ.setdefault('PYGAME_HIDE_SUPPORT_PROMPT', '1')
import pygame

from constants import BYTES_PER_PIXEL, FPS, PIXEL_SIZE


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, width: int, height: int, pixel_size: int, title: str):
#     - Side Effects: Initializes Pygame and creates a fixed-size, non-resizable
#       window of (width * pixel_size) x (height * pixel_size).
#     - Invariants: self.frame is a bytearray of exactly width*height*4 bytes
#       and is never reallocated.
#
#   - poll(self) -> bool:
#     - Outputs: False if the user has quit (window close or ESC).
#
#   - present(self) -> None:
#     - Side Effects: Scales the frame buffer to the window and flips.


class Visualizer:
    """
    Owns the window and the RGBA frame buffer the scene renders into.
    """
    def __init__(self, width: int, height: int, pixel_size: int = PIXEL_SIZE,
                 title: str = "Phase Space", fps: int = FPS):
        pygame.init()

        self.width = width
        self.height = height
        self.fps = fps
        self.window_size = (width * pixel_size, height * pixel_size)
        self.screen = pygame.display.set_mode(self.window_size)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()

        self.frame = bytearray(width * height * BYTES_PER_PIXEL)

        logging.info(
            f"Visualizer initialized with Pygame display "
            f"({self.window_size[0]}x{self.window_size[1]}), "
            f"frame buffer {width}x{height}."
        )

    def poll(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False
        return True

    def present(self) -> None:
        surface = pygame.image.frombuffer(self.frame, (self.width, self.height), "RGBA")
        if self.window_size != (self.width, self.height):
            surface = pygame.transform.scale(surface, self.window_size)
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()
        if self.fps > 0:
            self.clock.tick(self.fps)

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
