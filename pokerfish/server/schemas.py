"""
Pydantic schemas for table configuration and API requests.

Configuration values are clamped into range rather than rejected, so any
table a client asks for can be built.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from pokerfish.agents.profiles import (
    PERSONALITIES, DEFAULT_PERSONALITY, DEFAULT_DIFFICULTY, MIN_DIFFICULTY, MAX_DIFFICULTY,
)
from pokerfish.core.rules import (
    DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND, DEFAULT_BUY_IN, DEFAULT_THINKING_TIME,
    MIN_PLAYERS, MAX_PLAYERS,
)


MAX_THINKING_TIME = 10.0

# Personalities handed out to seats added by clamping
FILL_PERSONALITIES = ("tight", "loose", "aggressive", "passive", "maniac")


# ============= Configuration Schemas =============

class SeatConfig(BaseModel):
    """One seat at the table."""
    name: str = ""
    kind: str = Field(default="agent", description="human or agent")
    personality: str = DEFAULT_PERSONALITY
    difficulty: int = DEFAULT_DIFFICULTY

    @field_validator("kind", mode="before")
    @classmethod
    def _clamp_kind(cls, value: Any) -> str:
        kind = str(value or "").lower()
        return kind if kind in ("human", "agent") else "agent"

    @field_validator("personality", mode="before")
    @classmethod
    def _clamp_personality(cls, value: Any) -> str:
        name = str(value or "").lower()
        return name if name in PERSONALITIES else DEFAULT_PERSONALITY

    @field_validator("difficulty", mode="before")
    @classmethod
    def _clamp_difficulty(cls, value: Any) -> int:
        try:
            level = int(value)
        except (TypeError, ValueError):
            return DEFAULT_DIFFICULTY
        return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, level))

    @property
    def is_human(self) -> bool:
        return self.kind == "human"


def _default_seats() -> List[SeatConfig]:
    return [
        SeatConfig(name="You", kind="human"),
        SeatConfig(personality="tight"),
        SeatConfig(personality="loose"),
        SeatConfig(personality="aggressive"),
    ]


class TableConfig(BaseModel):
    """Settings for a new table."""
    seats: List[SeatConfig] = Field(default_factory=_default_seats)
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    buy_in: int = DEFAULT_BUY_IN
    thinking_time: float = Field(default=DEFAULT_THINKING_TIME, description="Agent delay in seconds")
    seed: Optional[int] = None

    @field_validator("thinking_time", mode="before")
    @classmethod
    def _clamp_thinking_time(cls, value: Any) -> float:
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return DEFAULT_THINKING_TIME
        return max(0.0, min(MAX_THINKING_TIME, seconds))

    @model_validator(mode="after")
    def _clamp_table(self) -> "TableConfig":
        seats = list(self.seats[:MAX_PLAYERS])
        while len(seats) < MIN_PLAYERS:
            personality = FILL_PERSONALITIES[len(seats) % len(FILL_PERSONALITIES)]
            seats.append(SeatConfig(personality=personality))
        self.seats = seats

        self.small_blind = max(1, self.small_blind)
        self.big_blind = max(self.small_blind, self.big_blind)
        self.buy_in = max(1, self.buy_in)
        return self


# ============= Request Schemas =============

class ActionRequest(BaseModel):
    """Request to take a game action for a human seat."""
    seat: int
    action: str = Field(..., description="Action type: FOLD, CHECK, CALL, RAISE")
    amount: int = Field(default=0, description="Raise increment above the call")


# ============= Response Schemas =============

class SeatSummarySchema(BaseModel):
    seat: int
    name: str
    kind: str
    personality: Optional[str] = None
    difficulty: Optional[int] = None


class TableCreatedSchema(BaseModel):
    """Response to table creation."""
    table_id: str
    seats: List[SeatSummarySchema]
    small_blind: int
    big_blind: int
    buy_in: int
    thinking_time: float


class ActionResultSchema(BaseModel):
    """Result of an action."""
    success: bool
    message: str
    action_type: Optional[str] = None
    amount: int = 0
    state: Optional[Dict[str, Any]] = None
