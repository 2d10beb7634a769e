"""Player configuration system for Chain Reaction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PlayerType = Literal["random", "avoid_others", "form_chains", "human", "fixed"]

PLAYER_TYPES: tuple[str, ...] = ("random", "avoid_others", "form_chains", "human", "fixed")


@dataclass
class PlayerConfig:
    """Configuration for a single player.

    Attributes:
        player_type: Strategy to use ('random', 'avoid_others', 'form_chains',
            'human' or 'fixed')
        rng_seed: Random seed for this player (None = derived from the session seed)
        fixed_x: Column played by a 'fixed' player
        fixed_y: Row played by a 'fixed' player
        name: Optional display name
    """

    player_type: PlayerType = "random"

    rng_seed: int | None = None

    # Fixed player target
    fixed_x: int | None = None
    fixed_y: int | None = None

    name: str | None = None

    @classmethod
    def random(cls, seed: int | None = None) -> PlayerConfig:
        """Create a random player configuration."""
        return cls(player_type="random", rng_seed=seed)

    @classmethod
    def avoid_others(cls) -> PlayerConfig:
        """Create an avoid-dense-areas player configuration."""
        return cls(player_type="avoid_others")

    @classmethod
    def form_chains(cls, seed: int | None = None) -> PlayerConfig:
        """Create a chain-forming player configuration."""
        return cls(player_type="form_chains", rng_seed=seed)

    @classmethod
    def human(cls) -> PlayerConfig:
        """Create a human player configuration."""
        return cls(player_type="human")

    @classmethod
    def fixed(cls, x: int, y: int) -> PlayerConfig:
        """Create a player that always plays ``(x, y)``."""
        return cls(player_type="fixed", fixed_x=x, fixed_y=y)


def parse_player_spec(spec: str) -> PlayerConfig:
    """Parse a player specification string into a PlayerConfig.

    Format:
        TYPE[:PARAM=VALUE,PARAM=VALUE,...]

    Examples:
        "random" -> Random player
        "random:seed=7" -> Seeded random player
        "avoid_others" -> Avoid-dense-areas heuristic
        "form_chains:seed=3,name=Chainer" -> Named chain-forming heuristic
        "fixed:x=0,y=0" -> Always plays the top-left corner
        "human" -> Human player

    Supported parameters:
        - seed (int): Random seed (random, form_chains)
        - x, y (int): Target cell (fixed, required)
        - name (str): Display name (any type)
    """
    parts = spec.split(":", 1)
    player_type = parts[0].strip().lower().replace("-", "_")

    if player_type not in PLAYER_TYPES:
        raise ValueError(
            f"Invalid player type: {player_type}. Must be one of {', '.join(PLAYER_TYPES)}"
        )

    # Parse parameters if provided
    params = {}
    if len(parts) == 2:
        for param_pair in parts[1].split(","):
            param_pair = param_pair.strip()
            if not param_pair:
                continue
            if "=" not in param_pair:
                raise ValueError(f"Invalid parameter format: {param_pair}. Expected PARAM=VALUE")
            key, value = param_pair.split("=", 1)
            key = key.strip()
            value = value.strip()

            if key in ["seed", "x", "y"]:
                params[key] = int(value)
            elif key == "name":
                params[key] = value
            else:
                raise ValueError(f"Unknown parameter: {key}")

    if player_type == "random":
        config = PlayerConfig.random(seed=params.get("seed"))
    elif player_type == "form_chains":
        config = PlayerConfig.form_chains(seed=params.get("seed"))
    elif player_type == "avoid_others":
        config = PlayerConfig.avoid_others()
    elif player_type == "human":
        config = PlayerConfig.human()
    else:  # fixed
        if "x" not in params or "y" not in params:
            raise ValueError("Fixed players need both x and y, e.g. fixed:x=0,y=0")
        config = PlayerConfig.fixed(params["x"], params["y"])

    config.name = params.get("name")
    return config
