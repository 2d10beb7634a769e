"""Game constants shared across modules.

This module contains the hook event vocabulary and the default values used by
the engine, the runner and the command-line entry points.
"""

# Owner value stored for cells nobody owns
EMPTY = -1

# Engine events
UPDATE = "update"
EXPLOSION_DELAY = "explosionDelay"
ENGINE_EVENTS = (UPDATE, EXPLOSION_DELAY)

# Runner events
TURN_DELAY = "turnDelay"
GAME_DELAY = "gameDelay"
RUNNER_EVENTS = (TURN_DELAY, GAME_DELAY)

# Pacing hooks dropped when a run ends or is cancelled; update observers stay
DELAY_EVENTS = (TURN_DELAY, EXPLOSION_DELAY, GAME_DELAY)

# Defaults for simulations
DEFAULT_WIDTH = 6
DEFAULT_HEIGHT = 6
DEFAULT_GAMES = 100
