# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They cover rendering, the fixed per-tick physics terms, and the defaults
used when config.json leaves a section or key out.
"""

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a fixed-size window (WINDOW_WIDTH x WINDOW_HEIGHT).
FULLSCREEN = False
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
FPS = 60
BACKGROUND_COLOR = (255, 255, 255) # White
FPS_TEXT_COLOR = (80, 80, 80) # Dark Gray
FPS_TEXT_POSITION = (20, 20)
FPS_FONT_SIZE = 20

# --- Particle Physics ---
# Added to a particle's color phase each tick.
COLOR_DRIFT = 0.01
# Per-axis velocity jitter is speed * (JITTER_SPAN * U - JITTER_SPAN / 2).
JITTER_SPAN = 0.04
# Upper bound on position steps taken to pull two overlapping particles apart.
MAX_SEPARATION_STEPS = 100

# Defaults merged under the values loaded from config.json.
DEFAULT_CONFIG = {
    "simulation_parameters": {
        "seed": None,
        "count": 16,
        "lifetime": -1,
        "center": [200.0, 200.0],
        "size": 32.0,
        "radius": 100.0,
        "sides": 3,
        "speed": 4.0,
        "max_separation_steps": MAX_SEPARATION_STEPS,
    },
    "run_control": {
        "max_steps": -1,
        "log_throttle_steps": 100,
    },
    "visualization": {
        "fullscreen": FULLSCREEN,
        "width": WINDOW_WIDTH,
        "height": WINDOW_HEIGHT,
        "fps": FPS,
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(levelname)s - %(message)s",
        "log_file": "logs/emitter.log",
    },
}
