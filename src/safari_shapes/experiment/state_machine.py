"""
Machine à états des manches de l'expérience Safari Shapes.

Séquence : NOT_STARTED → ACTIVE(k) → EVALUATING → ACTIVE(k+1) | COMPLETE.

Les ressources externes d'une manche (minuteur, écoute de présence) sont
acquises à l'entrée de la manche et libérées à sa sortie via une
`ExitStack` ; aucune ne survit à une transition.
"""

from __future__ import annotations

import random
from contextlib import ExitStack
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from safari_shapes.board.comparator import similarity
from safari_shapes.board.grid import GridModel
from safari_shapes.board.placement import PlacementEngine
from safari_shapes.board.scoring import ScoreProgress, score_progress, unique_shape_count
from safari_shapes.board.scoring import score as board_score
from safari_shapes.core.errors import (
    CannotPlace,
    NoShapeAtCell,
    OutOfBounds,
    RoundStateError,
)
from safari_shapes.core.models import PaletteEntry, PlacedShape, Position
from safari_shapes.experiment.collaborators import (
    CountdownTimer,
    LivenessSignal,
    LoggingNotifier,
    Notifier,
    Severity,
)
from safari_shapes.experiment.config import ExperimentConfig
from safari_shapes.experiment.layouts import build_reference
from safari_shapes.experiment.rounds import ExperimentCondition, ObjectiveKind, RoundConfig, pick_condition
from safari_shapes.utils.logger import LogLevel, SafariLogger, get_logger


class RoundPhase(Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    EVALUATING = "evaluating"
    COMPLETE = "complete"


@dataclass
class RoundRecord:
    """Bilan figé d'une manche terminée, plateau final compris."""

    round: int
    objective: ObjectiveKind
    score: int
    completed: bool
    shape_count: int
    board: GridModel = field(repr=False)
    condition: Optional[ExperimentCondition] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round": self.round,
            "objective": self.objective.value,
            "score": self.score,
            "completed": self.completed,
            "shape_count": self.shape_count,
            "condition": self.condition.name if self.condition else None,
        }


class RoundStateMachine:
    """
    Orchestrateur d'une session : reçoit les événements du joueur, pilote le
    moteur de placement et réévalue la complétion après chaque modification.

    Les collaborateurs externes sont injectés ; seuls le notifier et la
    source aléatoire ont une valeur par défaut.
    """

    def __init__(
        self,
        config: Optional[ExperimentConfig] = None,
        engine: Optional[PlacementEngine] = None,
        notifier: Optional[Notifier] = None,
        timer: Optional[CountdownTimer] = None,
        liveness: Optional[LivenessSignal] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[SafariLogger] = None,
    ):
        self.config = config or ExperimentConfig.default()
        self.logger = logger or get_logger()
        self.engine = engine or PlacementEngine(logger=self.logger)
        self.notifier = notifier or LoggingNotifier(self.logger)
        self.timer = timer
        self.liveness = liveness
        self.rng = rng or random.Random()

        self.phase = RoundPhase.NOT_STARTED
        self.round_number = 0
        self.grid = GridModel(self.config.board_size)
        self.reference: Optional[GridModel] = None
        self.condition: Optional[ExperimentCondition] = None
        self.selected: Optional[PaletteEntry] = None
        self.is_round_complete = False
        self.paused = False
        self.history: List[RoundRecord] = []
        self.explore_exploit_score: Optional[float] = None
        self._resources = ExitStack()

    # ==================== STATE HELPERS ====================

    def _require(self, *phases: RoundPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise RoundStateError(f"Operation requires phase in ({allowed}), current phase is {self.phase.value}")

    @property
    def current_round(self) -> RoundConfig:
        self._require(RoundPhase.ACTIVE, RoundPhase.EVALUATING)
        return self.config.round(self.round_number)

    @property
    def is_last_round(self) -> bool:
        return self.round_number == self.config.total_rounds

    @property
    def time_pressure(self) -> bool:
        return self.condition is not None and self.condition.has_time_pressure

    @property
    def visible_reference(self) -> Optional[GridModel]:
        """Référence à afficher au joueur (toujours pour une copie, sinon selon la config)."""
        if self.reference is None or self.phase is not RoundPhase.ACTIVE:
            return None
        round_cfg = self.current_round
        if round_cfg.objective.kind is ObjectiveKind.COPY_REFERENCE or round_cfg.show_reference:
            return self.reference
        return None

    # ==================== QUERIES ====================

    @property
    def score(self) -> int:
        return board_score(self.grid)

    @property
    def shape_count(self) -> int:
        return unique_shape_count(self.grid)

    def progress(self) -> ScoreProgress:
        return score_progress(self.grid, self.config.target_score)

    def round_scores(self) -> List[Dict[str, int]]:
        """Historique `{round, score}` dans l'ordre de jeu."""
        return [{"round": r.round, "score": r.score} for r in self.history]

    def ranked_history(self) -> List[RoundRecord]:
        """Manches triées du meilleur score au moins bon."""
        return sorted(self.history, key=lambda r: (-r.score, r.round))

    def final_boards(self) -> Dict[int, GridModel]:
        return {r.round: r.board for r in self.history}

    # ==================== ROUND LIFECYCLE ====================

    def start(self) -> None:
        """Démarre l'expérience sur la manche 1."""
        self._require(RoundPhase.NOT_STARTED)
        reference = self._reference_for(1)
        self.logger.section("SAFARI SHAPES EXPERIMENT")
        self._enter_round(1, reference)

    def _reference_for(self, number: int) -> Optional[GridModel]:
        reference = self.config.reference_for(number)
        return build_reference(reference) if reference is not None else None

    def _enter_round(self, number: int, reference: Optional[GridModel]) -> None:
        round_cfg = self.config.round(number)
        self.round_number = number
        self.grid = GridModel(self.config.board_size)
        self.reference = reference
        self.selected = None
        self.is_round_complete = False
        self.paused = False

        if round_cfg.randomize_condition:
            self.condition = pick_condition(self.config.conditions, self.rng)
        else:
            self.condition = round_cfg.condition

        self._resources = ExitStack()
        if self.time_pressure and self.timer is not None:
            self.timer.start(self.config.time_limit_seconds, self._on_timer_expired)
            self._resources.callback(self.timer.stop)
        if self.liveness is not None:
            self.liveness.start(self.pause, self.resume)
            self._resources.callback(self.liveness.stop)

        self.phase = RoundPhase.ACTIVE
        self.logger.step(
            LogLevel.ROUND,
            f"Round {number}/{self.config.total_rounds} started",
            objective=round_cfg.objective.kind.value,
            condition=self.condition.name if self.condition else None,
        )

        message = round_cfg.objective.describe()
        if self.condition is not None:
            message = f"{message} {self.condition.description}"
        self.notifier.notify(f"Round {number}", message, Severity.INFO)

    def _exit_round(self) -> None:
        self._resources.close()
        self.paused = False

    def evaluate(self) -> bool:
        """Réévalue la complétion de la manche courante (après chaque placement / retrait)."""
        self._require(RoundPhase.ACTIVE)
        self.phase = RoundPhase.EVALUATING
        was_complete = self.is_round_complete
        round_cfg = self.current_round
        self.is_round_complete = round_cfg.objective.is_complete(self.grid, self.reference)
        self.phase = RoundPhase.ACTIVE

        self.logger.step(
            LogLevel.SCORING,
            f"Score {self.score}, {self.shape_count} animals",
            complete=self.is_round_complete,
        )
        if self.is_round_complete and not was_complete:
            self.notifier.notify("Round Complete!", self._completion_message(round_cfg), Severity.SUCCESS)
        return self.is_round_complete

    def _completion_message(self, round_cfg: RoundConfig) -> str:
        objective = round_cfg.objective
        if objective.kind is ObjectiveKind.COPY_REFERENCE:
            return "Your safari matches the reference layout."
        if objective.kind is ObjectiveKind.FREE_FORM_MIN_SHAPES:
            return f"You've placed at least {objective.threshold} animals."
        return f"You've reached the target score of {objective.target} points!"

    def advance_round(self, force: bool = False) -> bool:
        """
        Clôt la manche courante et passe à la suivante (ou termine l'expérience).

        Sans `force`, une manche non terminée n'est pas clôturée : le joueur
        est notifié et la méthode retourne False.
        """
        self._require(RoundPhase.ACTIVE)
        if not self.is_round_complete and not force:
            self.notifier.notify(
                "Round not complete",
                "Finish the current objective before moving on.",
                Severity.DESTRUCTIVE,
            )
            return False

        # Tout ce qui peut échouer est calculé avant de toucher à l'état.
        if self.is_last_round:
            next_reference = None
            explore_exploit = self.compute_explore_exploit(self.grid)
        else:
            next_reference = self._reference_for(self.round_number + 1)
            explore_exploit = None

        self.phase = RoundPhase.EVALUATING
        round_cfg = self.current_round
        record = RoundRecord(
            round=self.round_number,
            objective=round_cfg.objective.kind,
            score=self.score,
            completed=self.is_round_complete,
            shape_count=self.shape_count,
            board=self.grid.copy(),
            condition=self.condition,
        )
        self.history.append(record)
        self.logger.count("rounds_finished")
        self.logger.success(
            LogLevel.ROUND,
            f"Round {record.round} finished",
            score=record.score,
            completed=record.completed,
            forced=force and not record.completed,
        )
        self._exit_round()

        if explore_exploit is not None:
            self._finish(explore_exploit)
        else:
            self._enter_round(self.round_number + 1, next_reference)
        return True

    def _finish(self, explore_exploit: float) -> None:
        self.explore_exploit_score = explore_exploit
        self.phase = RoundPhase.COMPLETE
        self.reference = None
        self.selected = None
        self.logger.success(
            LogLevel.EXPERIMENT,
            "Experiment complete",
            explore_exploit=round(self.explore_exploit_score, 1),
            total_score=sum(r.score for r in self.history),
        )
        self.notifier.notify(
            "Experiment complete",
            f"Thanks for playing! Exploration score: {self.explore_exploit_score:.0f}%",
            Severity.SUCCESS,
        )

    def compute_explore_exploit(self, final_board: Optional[GridModel] = None) -> float:
        """
        100 − similarité entre le plateau final et la référence de la manche
        désignée (les dernières manches peuvent être biaisées par une condition).

        Sans `final_board`, mesure le plateau de la dernière manche terminée.
        """
        if final_board is None:
            if not self.history:
                raise RoundStateError("No finished round to measure")
            final_board = self.history[-1].board
        designated = self.config.designated_reference_round
        reference = self._reference_for(designated)
        value = 100.0 - similarity(final_board, reference)
        self.logger.step(LogLevel.COMPARISON, "Explore/exploit measured", reference_round=designated, value=value)
        return value

    def reset_experiment(self, restart: bool = True) -> None:
        """Abandonne la session courante ; relance la manche 1 si `restart`."""
        self._exit_round()
        self.phase = RoundPhase.NOT_STARTED
        self.round_number = 0
        self.grid = GridModel(self.config.board_size)
        self.reference = None
        self.condition = None
        self.selected = None
        self.is_round_complete = False
        self.history = []
        self.explore_exploit_score = None
        self.logger.step(LogLevel.EXPERIMENT, "Experiment reset")
        if restart:
            self.start()

    # ==================== PLAYER INPUT ====================

    def select_category(self, entry: PaletteEntry) -> None:
        self._require(RoundPhase.ACTIVE)
        self.selected = entry
        self.logger.step(LogLevel.PLACEMENT, f"Selected {entry.label}", category=str(entry.category))

    def click_cell(self, row: int, col: int) -> Optional[PlacedShape]:
        """
        Clic sur une cellule : retire l'animal présent, sinon pose l'animal
        sélectionné. Retourne la forme posée ou retirée, None si rien n'a changé.
        """
        self._require(RoundPhase.ACTIVE)
        if self.paused:
            self.notifier.notify("Round paused", "The round is paused; resume to keep building.", Severity.INFO)
            return None

        try:
            occupant = self.grid.cell_at(row, col)
        except OutOfBounds as exc:
            self.notifier.notify("Can't place here", str(exc), Severity.DESTRUCTIVE)
            return None

        if occupant is not None:
            return self.remove_shape(row, col)

        if self.selected is None:
            self.notifier.notify("No animal selected", "Select an animal from the palette first.", Severity.INFO)
            return None

        try:
            shape = self.engine.place(self.grid, self.selected.category, Position(row, col), label=self.selected.label)
        except CannotPlace as exc:
            self.notifier.notify("Can't place here", exc.user_message, Severity.DESTRUCTIVE)
            return None

        self.evaluate()
        return shape

    def remove_shape(self, row: int, col: int) -> Optional[PlacedShape]:
        self._require(RoundPhase.ACTIVE)
        try:
            removed = self.engine.remove(self.grid, (row, col))
        except (NoShapeAtCell, OutOfBounds) as exc:
            self.notifier.notify("Nothing to remove", str(exc), Severity.DESTRUCTIVE)
            return None
        self.evaluate()
        return removed

    # ==================== EXTERNAL SIGNALS ====================

    def pause(self) -> None:
        """Demande de pause venant du signal de présence."""
        if self.phase is not RoundPhase.ACTIVE or self.paused:
            return
        self.paused = True
        if self.time_pressure and self.timer is not None:
            self.timer.pause()
        self.logger.step(LogLevel.ROUND, f"Round {self.round_number} paused")
        self.notifier.notify("Are you still there?", "The round is paused until we hear from you.", Severity.INFO)

    def resume(self) -> None:
        if self.phase is not RoundPhase.ACTIVE or not self.paused:
            return
        self.paused = False
        if self.time_pressure and self.timer is not None:
            self.timer.resume()
        self.logger.step(LogLevel.ROUND, f"Round {self.round_number} resumed")

    def _on_timer_expired(self) -> None:
        if self.phase is not RoundPhase.ACTIVE:
            return
        self.notifier.notify("Time's up!", f"Round {self.round_number} is over.", Severity.INFO)
        self.advance_round(force=True)


__all__ = ["RoundPhase", "RoundRecord", "RoundStateMachine"]
