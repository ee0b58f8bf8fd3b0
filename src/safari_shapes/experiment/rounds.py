"""
Définition des manches : objectifs, prédicats de complétion et conditions
expérimentales (charge cognitive, pression temporelle).
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from safari_shapes.board.comparator import layouts_equal
from safari_shapes.board.grid import GridModel
from safari_shapes.board.scoring import score, unique_shape_count
from safari_shapes.core.errors import ConfigError


class ObjectiveKind(Enum):
    """Type d'objectif d'une manche."""

    COPY_REFERENCE = "copy-reference"
    FREE_FORM_MIN_SHAPES = "free-form-min-shapes"
    TARGET_SCORE = "target-score"


@dataclass(frozen=True)
class RoundObjective:
    """Objectif d'une manche et son paramètre (seuil de formes ou score cible)."""

    kind: ObjectiveKind
    threshold: int = 0
    target: int = 0

    def __post_init__(self) -> None:
        if self.kind is ObjectiveKind.FREE_FORM_MIN_SHAPES and self.threshold < 1:
            raise ValueError("free-form-min-shapes objectives need a threshold >= 1")
        if self.kind is ObjectiveKind.TARGET_SCORE and self.target < 1:
            raise ValueError("target-score objectives need a target >= 1")

    @classmethod
    def copy_reference(cls) -> "RoundObjective":
        return cls(ObjectiveKind.COPY_REFERENCE)

    @classmethod
    def free_form(cls, threshold: int) -> "RoundObjective":
        return cls(ObjectiveKind.FREE_FORM_MIN_SHAPES, threshold=threshold)

    @classmethod
    def target_score(cls, target: int) -> "RoundObjective":
        return cls(ObjectiveKind.TARGET_SCORE, target=target)

    def is_complete(self, player: GridModel, reference: Optional[GridModel]) -> bool:
        """Évalue le prédicat de complétion propre à l'objectif."""
        if self.kind is ObjectiveKind.COPY_REFERENCE:
            return reference is not None and layouts_equal(player, reference)
        if self.kind is ObjectiveKind.FREE_FORM_MIN_SHAPES:
            return unique_shape_count(player) >= self.threshold
        return score(player) >= self.target

    def describe(self) -> str:
        if self.kind is ObjectiveKind.COPY_REFERENCE:
            return "Copy the reference layout exactly."
        if self.kind is ObjectiveKind.FREE_FORM_MIN_SHAPES:
            return f"Create your own safari with at least {self.threshold} animals."
        return f"Arrange animal enclosures to score at least {self.target} points."

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.kind is ObjectiveKind.FREE_FORM_MIN_SHAPES:
            data["threshold"] = self.threshold
        if self.kind is ObjectiveKind.TARGET_SCORE:
            data["target"] = self.target
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundObjective":
        try:
            kind = ObjectiveKind(data["kind"])
            return cls(kind, threshold=int(data.get("threshold", 0)), target=int(data.get("target", 0)))
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid round objective {data!r}: {exc}") from exc


class CognitiveLoad(Enum):
    NONE = 0
    LOW = 1
    HIGH = 2


@dataclass(frozen=True)
class ExperimentCondition:
    """Condition expérimentale tirée au sort pour une manche."""

    name: str
    cognitive_load_level: CognitiveLoad
    has_time_pressure: bool
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "cognitive_load_level": self.cognitive_load_level.name.lower(),
            "has_time_pressure": self.has_time_pressure,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperimentCondition":
        try:
            return cls(
                name=data["name"],
                cognitive_load_level=CognitiveLoad[str(data.get("cognitive_load_level", "none")).upper()],
                has_time_pressure=bool(data.get("has_time_pressure", False)),
                description=data.get("description", ""),
            )
        except KeyError as exc:
            raise ConfigError(f"Invalid experiment condition {data!r}") from exc


DEFAULT_CONDITIONS: List[ExperimentCondition] = [
    ExperimentCondition("control", CognitiveLoad.NONE, False, "Build freely, no extra condition."),
    ExperimentCondition("low_load", CognitiveLoad.LOW, False, "Keep a 3-digit number in mind while you build."),
    ExperimentCondition("high_load", CognitiveLoad.HIGH, False, "Keep a 7-digit number in mind while you build."),
    ExperimentCondition("time_pressure", CognitiveLoad.NONE, True, "Build before the countdown runs out."),
    ExperimentCondition(
        "high_load_time_pressure",
        CognitiveLoad.HIGH,
        True,
        "Keep a 7-digit number in mind and beat the countdown.",
    ),
]


def pick_condition(conditions: Sequence[ExperimentCondition], rng: random.Random) -> ExperimentCondition:
    """Tire une condition au sort via la source aléatoire injectée."""
    if not conditions:
        raise ConfigError("No experiment conditions configured")
    return conditions[rng.randrange(len(conditions))]


@dataclass
class RoundConfig:
    """
    Paramétrage d'une manche.

    `reference` est le nom d'un layout de référence (voir `layouts.py`) ou un
    layout JSON inline ; `show_reference` l'affiche à titre d'inspiration
    dans les manches libres.
    """

    number: int
    objective: RoundObjective
    reference: Optional[Any] = None
    show_reference: bool = True
    randomize_condition: bool = False
    condition: Optional[ExperimentCondition] = None

    def __post_init__(self) -> None:
        if self.objective.kind is ObjectiveKind.COPY_REFERENCE and self.reference is None:
            raise ValueError(f"Round {self.number}: copy-reference rounds need a reference layout")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "number": self.number,
            "objective": self.objective.to_dict(),
            "reference": self.reference,
            "show_reference": self.show_reference,
            "randomize_condition": self.randomize_condition,
        }
        if self.condition is not None:
            data["condition"] = self.condition.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundConfig":
        try:
            condition = data.get("condition")
            return cls(
                number=int(data["number"]),
                objective=RoundObjective.from_dict(data["objective"]),
                reference=data.get("reference"),
                show_reference=bool(data.get("show_reference", True)),
                randomize_condition=bool(data.get("randomize_condition", False)),
                condition=ExperimentCondition.from_dict(condition) if condition else None,
            )
        except ConfigError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid round configuration {data!r}: {exc}") from exc


__all__ = [
    "ObjectiveKind",
    "RoundObjective",
    "CognitiveLoad",
    "ExperimentCondition",
    "DEFAULT_CONDITIONS",
    "pick_condition",
    "RoundConfig",
]
