"""
Pydantic models for YAML game files.

These validate the data half of a game definition (timing, initial
sprites, globals, details, palette). Behaviour (init/update/input
callbacks) comes from the demo named by ``extends``.

Example game file:
    extends: ping_pong
    name: Fast Pong
    delay: 60
    details:
      Score: 0
      Lives: 5
    sprites:
      wall:
        x: 10
        y: 0
        width: 0
        height: 8
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CellSpec(BaseModel):
    """One polygon cell."""
    model_config = ConfigDict(extra='forbid')

    x: int = 0
    y: int = 0
    width: int = Field(1, ge=0)
    height: int = Field(1, ge=0)
    color: Optional[str] = None


class SpriteSpec(BaseModel):
    """Sprite options; unset fields take the engine defaults."""
    model_config = ConfigDict(extra='forbid')

    x: Optional[int] = None
    y: Optional[int] = None
    width: Optional[int] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0)
    velocity_x: Optional[int] = None
    velocity_y: Optional[int] = None
    color: Optional[str] = None
    polygon: List[CellSpec] = Field(default_factory=list)

    def to_options(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class PaletteSpec(BaseModel):
    """Colour token overrides."""
    model_config = ConfigDict(extra='forbid')

    default_color: Optional[str] = None
    white: Optional[str] = None
    black: Optional[str] = None
    gray: Optional[str] = None
    red: Optional[str] = None
    green: Optional[str] = None
    blue: Optional[str] = None
    yellow: Optional[str] = None
    purple: Optional[str] = None
    blue_green: Optional[str] = None


class GameFile(BaseModel):
    """Top-level YAML game file."""
    model_config = ConfigDict(extra='forbid')

    name: Optional[str] = None
    extends: Optional[str] = None
    delay: Optional[int] = Field(None, gt=0)
    hide_on_pause: Optional[bool] = None
    initial_delay: Optional[int] = Field(None, ge=0)
    globals: Dict[str, Any] = Field(default_factory=dict)
    sprites: Dict[str, SpriteSpec] = Field(default_factory=dict)
    details: Dict[str, Union[int, float, str]] = Field(default_factory=dict)
    palette: PaletteSpec = Field(default_factory=PaletteSpec)

    @field_validator('extends')
    @classmethod
    def normalize_extends(cls, v):
        if v is None:
            return v
        return v.strip().lower().replace(' ', '_').replace('-', '_')
