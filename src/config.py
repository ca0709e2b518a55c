from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Simulation clock
    tick_interval_ms: float = 16.0
    default_speed: float = 1.0
    speed_min: float = 0.1
    speed_max: float = 10.0

    # Rendered body size (20 = 1.0x mesh scale)
    default_body_scale: float = 20.0
    body_scale_min: float = 10.0
    body_scale_max: float = 50.0

    # Trail
    trail_width_scale: float = 0.1
    trail_max_samples: int = 20_000

    # Initial selection
    default_family: str = "lagrange"
    default_orbit: str = "l1"

    # Path previews
    path_samples: int = 240

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
