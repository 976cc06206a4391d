# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are the defaults for the screen, the colors and the physics of a
scene; anything experimental is overridden from config.json.
"""

# Screen settings
# The frame buffer is SCREEN_WIDTH x SCREEN_HEIGHT pixels. Each buffer
# pixel is shown as a PIXEL_SIZE x PIXEL_SIZE block in the window.
SCREEN_WIDTH = 400
SCREEN_HEIGHT = SCREEN_WIDTH
PIXEL_SIZE = 3
FPS = 60
BYTES_PER_PIXEL = 4

# Physics defaults
GRAVITY = 9.8
TIME_STEP = 0.1

# --- Colors (RGBA) ---
CLEAR_COLOR = (0, 0, 0, 255)
ARENA_COLOR = (100, 100, 100, 255)
BALL_COLOR = (255, 255, 255, 255)

# --- Phase Space Coloring ---
# Target range of a position-mapped color channel.
POSITION_CHANNEL_RANGE = (0.0, 255.0)
# Target range of a velocity-mapped color channel. The floor of 100 keeps
# slow particles visible against the black background.
VELOCITY_CHANNEL_RANGE = (100.0, 255.0)
# The velocity span mapped onto the channel range is 0..(width * factor).
VELOCITY_SPAN_FACTOR = 2.5 / 10.0

DEFAULT_SCENE = "1"
