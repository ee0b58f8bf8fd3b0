"""
Configuration d'une expérience : taille du plateau, programme des manches,
conditions expérimentales et palette.

Chargeable depuis un fichier JSON pour reparamétrer une session sans toucher
au code. Toute incohérence lève `ConfigError` dès la construction.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from safari_shapes.board.grid import DEFAULT_BOARD_SIZE
from safari_shapes.core.errors import ConfigError, InvalidCategory, LayoutFormatError
from safari_shapes.core.models import DEFAULT_PALETTE, PaletteEntry, ShapeCategory
from safari_shapes.experiment.layouts import build_reference
from safari_shapes.experiment.rounds import (
    DEFAULT_CONDITIONS,
    ExperimentCondition,
    ObjectiveKind,
    RoundConfig,
    RoundObjective,
)

TARGET_SCORE = 50


def default_rounds(target_score: int = TARGET_SCORE) -> List[RoundConfig]:
    """Programme par défaut : deux copies, puis des manches libres de plus en plus exigeantes."""
    return [
        RoundConfig(1, RoundObjective.copy_reference(), reference="fox_den"),
        RoundConfig(2, RoundObjective.copy_reference(), reference="savanna"),
        RoundConfig(3, RoundObjective.free_form(3), reference="savanna", show_reference=True),
        RoundConfig(4, RoundObjective.target_score(target_score), reference="sample_50", show_reference=True),
        RoundConfig(5, RoundObjective.free_form(4), show_reference=False),
        RoundConfig(6, RoundObjective.free_form(4), show_reference=False, randomize_condition=True),
        RoundConfig(7, RoundObjective.free_form(3), show_reference=False),
    ]


@dataclass
class ExperimentConfig:
    """
    Configuration complète d'une expérience.

    Attributes:
        board_size: côté du plateau carré (cellules)
        target_score: points requis dans les manches à score cible
        rounds: programme ordonné des manches (numéros 1..N)
        designated_reference_round: manche dont la référence sert à la
            mesure exploration/exploitation de fin d'expérience
        time_limit_seconds: durée du compte à rebours sous pression temporelle
        conditions: table des conditions tirées au sort
        palette: enclos proposés au joueur
    """
    board_size: int = DEFAULT_BOARD_SIZE
    target_score: int = TARGET_SCORE
    rounds: List[RoundConfig] = field(default_factory=default_rounds)
    designated_reference_round: int = 4
    time_limit_seconds: float = 60.0
    conditions: List[ExperimentCondition] = field(default_factory=lambda: list(DEFAULT_CONDITIONS))
    palette: List[PaletteEntry] = field(default_factory=lambda: list(DEFAULT_PALETTE))

    def __post_init__(self):
        self.validate()

    @classmethod
    def default(cls) -> "ExperimentConfig":
        return cls()

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    def round(self, number: int) -> RoundConfig:
        """Configuration de la manche `number` (à partir de 1)."""
        if not 1 <= number <= self.total_rounds:
            raise ConfigError(f"Round {number} is outside 1..{self.total_rounds}")
        return self.rounds[number - 1]

    def validate(self) -> None:
        """Lève `ConfigError` si la configuration est incohérente."""
        if self.board_size < 1:
            raise ConfigError("board_size must be >= 1")
        if not self.rounds:
            raise ConfigError("At least one round is required")
        numbers = [r.number for r in self.rounds]
        if numbers != list(range(1, len(self.rounds) + 1)):
            raise ConfigError(f"Rounds must be numbered 1..N in order, got {numbers}")
        if not 1 <= self.designated_reference_round <= len(self.rounds):
            raise ConfigError("designated_reference_round is outside the round schedule")
        if self.rounds[self.designated_reference_round - 1].reference is None:
            raise ConfigError(
                f"Round {self.designated_reference_round} has no reference layout to measure against"
            )
        if self.time_limit_seconds <= 0:
            raise ConfigError("time_limit_seconds must be positive")
        if any(r.randomize_condition for r in self.rounds) and not self.conditions:
            raise ConfigError("A round draws a random condition but no conditions are configured")
        for round_cfg in self.rounds:
            self._check_reference(round_cfg)

    def _check_reference(self, round_cfg: RoundConfig) -> None:
        """Construit la référence de la manche et vérifie qu'elle tient sur le plateau."""
        if round_cfg.reference is None:
            return
        try:
            reference = build_reference(round_cfg.reference)
        except (ConfigError, LayoutFormatError) as exc:
            raise ConfigError(f"Round {round_cfg.number}: invalid reference layout: {exc}") from exc
        if reference.size != self.board_size:
            raise ConfigError(
                f"Round {round_cfg.number}: reference layout is {reference.size}x{reference.size}, "
                f"board is {self.board_size}x{self.board_size}"
            )

    # ==================== SÉRIALISATION ====================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "board_size": self.board_size,
            "target_score": self.target_score,
            "designated_reference_round": self.designated_reference_round,
            "time_limit_seconds": self.time_limit_seconds,
            "rounds": [r.to_dict() for r in self.rounds],
            "conditions": [c.to_dict() for c in self.conditions],
            "palette": [
                {"label": p.label, "kind": p.category.kind.value, "size": p.category.size.value}
                for p in self.palette
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperimentConfig":
        """Construit une configuration ; les clés absentes prennent leur valeur par défaut."""
        try:
            target_score = int(data.get("target_score", TARGET_SCORE))
            kwargs: Dict[str, Any] = {"target_score": target_score}
            if "board_size" in data:
                kwargs["board_size"] = int(data["board_size"])
            if "designated_reference_round" in data:
                kwargs["designated_reference_round"] = int(data["designated_reference_round"])
            if "time_limit_seconds" in data:
                kwargs["time_limit_seconds"] = float(data["time_limit_seconds"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid experiment setting: {exc}") from exc

        kwargs["rounds"] = (
            [RoundConfig.from_dict(r) for r in data["rounds"]]
            if "rounds" in data
            else default_rounds(target_score)
        )
        if "conditions" in data:
            kwargs["conditions"] = [ExperimentCondition.from_dict(c) for c in data["conditions"]]
        if "palette" in data:
            try:
                kwargs["palette"] = [
                    PaletteEntry(p["label"], ShapeCategory.parse(p["kind"], p["size"]))
                    for p in data["palette"]
                ]
            except (KeyError, InvalidCategory) as exc:
                raise ConfigError(f"Invalid palette entry: {exc}") from exc

        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: str) -> "ExperimentConfig":
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path} is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    def save(self, path: str) -> Path:
        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        return config_path

    def objective_kinds(self) -> List[ObjectiveKind]:
        return [r.objective.kind for r in self.rounds]

    def reference_for(self, number: int) -> Optional[Any]:
        return self.round(number).reference


__all__ = ["ExperimentConfig", "default_rounds", "TARGET_SCORE"]
