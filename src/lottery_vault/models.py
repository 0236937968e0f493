from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import CycleNotCompletedError

DEFAULT_DRAWS_PER_COLOR = 2
DEFAULT_ANIMATION_DURATION = 2000


def now_millis() -> int:
    return int(time.time() * 1000)


def new_cycle_id(now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else now_millis()
    return f"cycle_{stamp}_{uuid.uuid4().hex}"


class PrizeColor(str, Enum):
    RED = "red"
    YELLOW = "yellow"
    BLUE = "blue"


# Number of colors a cycle is split across. Config.draws_per_cycle must equal
# draws_per_color times this.
COLOR_COUNT = len(PrizeColor)


@dataclass(frozen=True)
class Prize:
    """A prize in the catalog. Prizes never change once created."""

    id: str
    color: PrizeColor
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "color": self.color.value,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Prize":
        return Prize(
            id=data["id"],
            color=PrizeColor(data["color"]),
            name=data["name"],
            description=data.get("description"),
            icon=data.get("icon"),
        )


@dataclass(frozen=True)
class DrawResult:
    """Outcome of a single draw, recorded once and never mutated."""

    prize_id: str
    timestamp: int
    cycle_id: str
    draw_number: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prizeId": self.prize_id,
            "timestamp": self.timestamp,
            "cycleId": self.cycle_id,
            "drawNumber": self.draw_number,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "DrawResult":
        return DrawResult(
            prize_id=data["prizeId"],
            timestamp=int(data["timestamp"]),
            cycle_id=data["cycleId"],
            draw_number=int(data["drawNumber"]),
        )


@dataclass
class RemainingDraws:
    red: int = DEFAULT_DRAWS_PER_COLOR
    yellow: int = DEFAULT_DRAWS_PER_COLOR
    blue: int = DEFAULT_DRAWS_PER_COLOR

    @staticmethod
    def uniform(per_color: int) -> "RemainingDraws":
        return RemainingDraws(red=per_color, yellow=per_color, blue=per_color)

    def total(self) -> int:
        return self.red + self.yellow + self.blue

    def for_color(self, color: PrizeColor) -> int:
        return getattr(self, color.value)

    def by_color(self) -> Dict[PrizeColor, int]:
        return {color: self.for_color(color) for color in PrizeColor}

    def to_dict(self) -> Dict[str, Any]:
        return {"red": self.red, "yellow": self.yellow, "blue": self.blue}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "RemainingDraws":
        return RemainingDraws(
            red=int(data["red"]),
            yellow=int(data["yellow"]),
            blue=int(data["blue"]),
        )


@dataclass
class Cycle:
    """One round of drawing.

    ``end_time`` stays ``None`` while the cycle is open. The drawing logic sets
    it, together with ``completed``, once every draw has been consumed.
    """

    id: str
    start_time: int
    end_time: Optional[int] = None
    results: List[DrawResult] = field(default_factory=list)
    completed: bool = False
    remaining_draws: RemainingDraws = field(default_factory=RemainingDraws)

    def draws_made(self) -> int:
        return len(self.results)

    def can_draw(self) -> bool:
        return not self.completed and self.remaining_draws.total() > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "results": [r.to_dict() for r in self.results],
            "completed": self.completed,
            "remainingDraws": self.remaining_draws.to_dict(),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Cycle":
        end_time = data.get("endTime")
        return Cycle(
            id=data["id"],
            start_time=int(data["startTime"]),
            end_time=int(end_time) if end_time is not None else None,
            results=[DrawResult.from_dict(r) for r in data["results"]],
            completed=bool(data["completed"]),
            remaining_draws=RemainingDraws.from_dict(data["remainingDraws"]),
        )


@dataclass
class Config:
    draws_per_cycle: int = DEFAULT_DRAWS_PER_COLOR * COLOR_COUNT
    draws_per_color: int = DEFAULT_DRAWS_PER_COLOR
    enable_animations: bool = True
    animation_duration: int = DEFAULT_ANIMATION_DURATION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "drawsPerCycle": self.draws_per_cycle,
            "drawsPerColor": self.draws_per_color,
            "enableAnimations": self.enable_animations,
            "animationDuration": self.animation_duration,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Config":
        return Config(
            draws_per_cycle=int(data["drawsPerCycle"]),
            draws_per_color=int(data["drawsPerColor"]),
            enable_animations=bool(data["enableAnimations"]),
            animation_duration=int(data["animationDuration"]),
        )


@dataclass
class State:
    """Everything the application persists, saved and loaded as one document.

    ``history`` holds finished cycles, oldest first. Entries are only ever
    appended.
    """

    current_cycle: Cycle
    history: List[Cycle] = field(default_factory=list)
    available_prizes: List[Prize] = field(default_factory=list)
    config: Config = field(default_factory=Config)

    def prize_by_id(self, prize_id: str) -> Optional[Prize]:
        for prize in self.available_prizes:
            if prize.id == prize_id:
                return prize
        return None

    def rollover(self, now_ms: Optional[int] = None) -> "State":
        """Archive the completed current cycle and start a fresh one.

        Returns a new State; this one is left untouched.
        """
        if not self.current_cycle.completed:
            raise CycleNotCompletedError(
                f"Cycle {self.current_cycle.id} still has "
                f"{self.current_cycle.remaining_draws.total()} draws left"
            )
        return replace(
            self,
            current_cycle=create_new_cycle(self.config, now_ms=now_ms),
            history=[*self.history, self.current_cycle],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentCycle": self.current_cycle.to_dict(),
            "history": [c.to_dict() for c in self.history],
            "availablePrizes": [p.to_dict() for p in self.available_prizes],
            "config": self.config.to_dict(),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "State":
        return State(
            current_cycle=Cycle.from_dict(data["currentCycle"]),
            history=[Cycle.from_dict(c) for c in data["history"]],
            available_prizes=[Prize.from_dict(p) for p in data["availablePrizes"]],
            config=Config.from_dict(data["config"]),
        )


def default_prizes() -> List[Prize]:
    return [
        Prize("prize_red_1", PrizeColor.RED, "Red Grand Prize", "A generous red prize"),
        Prize("prize_red_2", PrizeColor.RED, "Red Gift", "A fine red gift"),
        Prize("prize_yellow_1", PrizeColor.YELLOW, "Yellow Grand Prize", "A generous yellow prize"),
        Prize("prize_yellow_2", PrizeColor.YELLOW, "Yellow Gift", "A fine yellow gift"),
        Prize("prize_blue_1", PrizeColor.BLUE, "Blue Grand Prize", "A generous blue prize"),
        Prize("prize_blue_2", PrizeColor.BLUE, "Blue Gift", "A fine blue gift"),
    ]


def create_new_cycle(config: Optional[Config] = None, now_ms: Optional[int] = None) -> Cycle:
    cfg = config or Config()
    stamp = now_ms if now_ms is not None else now_millis()
    return Cycle(
        id=new_cycle_id(stamp),
        start_time=stamp,
        remaining_draws=RemainingDraws.uniform(cfg.draws_per_color),
    )


def create_initial_state(prizes: List[Prize], config: Optional[Config] = None) -> State:
    cfg = config or Config()
    return State(
        current_cycle=create_new_cycle(cfg),
        history=[],
        available_prizes=list(prizes),
        config=cfg,
    )


def create_default_state() -> State:
    """The state of a fresh installation: six prizes, six draws per cycle."""
    return create_initial_state(default_prizes(), Config())
