# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They cover rendering properties and the reference physics values used
whenever `config.json` leaves a parameter out.
"""

# Visualization settings
BACKGROUND_COLOR = (0, 0, 0) # Black
# Particles are drawn as small filled squares, offset by one pixel.
PARTICLE_SIZE = 3
PARTICLE_DRAW_OFFSET = 1
WINDOW_TITLE = "Particle Life"

# A default color per particle type, used if the config file does not
# provide a color list.
DEFAULT_COLORS = [
    (255, 64, 64),   # Red
    (64, 255, 64),   # Green
    (64, 128, 255),  # Blue
    (255, 204, 0),   # Gold
    (0, 255, 255),   # Cyan
    (204, 0, 255)    # Purple
]

# --- Reference simulation values ---
DEFAULT_PARTICLE_COUNT = 600
DEFAULT_PARTICLE_TYPES = 3
DEFAULT_DOMAIN_WIDTH = 1000.0
DEFAULT_DOMAIN_HEIGHT = 1000.0
DEFAULT_COUPLING_CONSTANT = 5e-3
DEFAULT_MIN_SQUARED_DISTANCE = 100.0
# Every matrix entry is multiplied by this before use.
DEFAULT_COEFFICIENT_MAGNITUDE = 1e4
DEFAULT_SEED = 42

# Row: type being pushed, column: type doing the pushing.
REFERENCE_INTERACTION_MATRIX = [
    [1.0, -1.0, 0.0],
    [1.0, 1.0, -1.0],
    [0.0, 1.0, 1.0]
]

# --- Run control ---
# ~30 FPS
DEFAULT_FRAME_INTERVAL = 1.0 / 30.0
DEFAULT_LOG_THROTTLE_STEPS = 100
