"""
Journal structuré de Safari Shapes.

Chaque événement (placement, scoring, transition de manche...) est conservé
en mémoire sous forme de `LogRecord`, étiqueté par composant, puis
éventuellement affiché en console et écrit dans un fichier (texte ou JSON
lines). Le journal tient aussi les compteurs de la session.

Usage:
    logger = SafariLogger(verbose=True)
    logger.step(LogLevel.PLACEMENT, "Placed Fox", row=1, col=1)

    with logger.timed_step(LogLevel.EXPERIMENT, "Demo session"):
        ...
"""

import json
import time
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple


class LogLevel(Enum):
    """Composant émetteur d'un enregistrement."""

    BOARD = "BOARD"
    PLACEMENT = "PLACEMENT"
    SCORING = "SCORING"
    COMPARISON = "COMPARISON"
    ROUND = "ROUND"
    EXPERIMENT = "EXPERIMENT"
    CONFIG = "CONFIG"
    ERROR = "ERROR"


# (couleur ANSI, pictogramme) par composant
STYLES: Dict[LogLevel, Tuple[str, str]] = {
    LogLevel.BOARD: ("\033[0;37m", "🗺️"),
    LogLevel.PLACEMENT: ("\033[0;36m", "🐾"),
    LogLevel.SCORING: ("\033[0;32m", "📊"),
    LogLevel.COMPARISON: ("\033[0;35m", "🔍"),
    LogLevel.ROUND: ("\033[1;33m", "🔄"),
    LogLevel.EXPERIMENT: ("\033[1;36m", "🧪"),
    LogLevel.CONFIG: ("\033[0;34m", "⚙️"),
    LogLevel.ERROR: ("\033[1;31m", "❌"),
}
ANSI_RESET = "\033[0m"


@dataclass
class LogRecord:
    """Un événement journalisé."""

    component: LogLevel
    severity: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    created: datetime = field(default_factory=datetime.now)
    duration_ms: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created.isoformat(),
            "severity": self.severity,
            "component": self.component.value,
            "message": self.message,
            "data": self.data,
            "duration_ms": self.duration_ms,
        }

    def as_json(self) -> str:
        return json.dumps(self.as_dict(), default=str, ensure_ascii=False)

    def as_text(self) -> str:
        line = f"{self.created:%Y-%m-%d %H:%M:%S} {self.severity:<7} {self.component.value:<10} {self.message}"
        if self.data:
            line += " | " + json.dumps(self.data, default=str, ensure_ascii=False)
        return line


@dataclass
class SessionMetrics:
    """Compteurs d'activité du plateau sur une session."""

    placements: int = 0
    removals: int = 0
    rejections: int = 0
    rounds_finished: int = 0
    step_durations: Dict[str, float] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def counters(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.type in (int, "int")}


class SafariLogger:
    """
    Journal partagé par le moteur de placement et la machine à états.

    Par défaut le journal est silencieux (rien en console) : les bibliothèques
    et les tests l'utilisent tel quel, la CLI l'active avec `verbose=True`.
    """

    def __init__(
        self,
        verbose: bool = False,
        log_file: Optional[str] = None,
        json_log: bool = False,
        use_colors: bool = True,
    ):
        self.verbose = verbose
        self.json_log = json_log
        self.use_colors = use_colors
        self.log_file = Path(log_file) if log_file else None
        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

        self.entries: List[LogRecord] = []
        self.metrics = SessionMetrics()

    # ------------------------------------------------------------ émission

    def _emit(self, record: LogRecord, nested: bool = False) -> LogRecord:
        self.entries.append(record)
        if self.verbose:
            self._echo(record, nested)
        if self.log_file is not None:
            with self.log_file.open("a", encoding="utf-8") as sink:
                sink.write((record.as_json() if self.json_log else record.as_text()) + "\n")
        return record

    def step(self, component: LogLevel, message: str, **data) -> None:
        self._emit(LogRecord(component, "INFO", message, data))

    def success(self, component: LogLevel, message: str, **data) -> None:
        self._emit(LogRecord(component, "INFO", f"✓ {message}", data))

    def warning(self, component: LogLevel, message: str, **data) -> None:
        """Condition récupérable (placement refusé, manche incomplète...)."""
        self.metrics.warnings.append(message)
        self._emit(LogRecord(component, "WARNING", f"⚠ {message}", data))

    def error(self, component: LogLevel, message: str, exception: Optional[Exception] = None, **data) -> None:
        """Erreur ; l'exception éventuelle est résumée dans `data`."""
        if exception is not None:
            data.update(exception_type=type(exception).__name__, exception_message=str(exception))
        data["component"] = component.value
        self.metrics.errors.append(message)
        self._emit(LogRecord(LogLevel.ERROR, "ERROR", f"✗ {message}", data))

    @contextmanager
    def timed_step(self, component: LogLevel, message: str, **data) -> Iterator[None]:
        """Chronomètre le bloc et cumule sa durée par composant."""
        self.step(component, f"{message}...")
        started = time.perf_counter()
        try:
            yield
        finally:
            elapsed = (time.perf_counter() - started) * 1000
            key = component.value.lower()
            self.metrics.step_durations[key] = self.metrics.step_durations.get(key, 0.0) + elapsed
            record = LogRecord(component, "INFO", f"↳ {message} took {elapsed:.1f}ms", data, duration_ms=elapsed)
            self._emit(record, nested=True)

    def count(self, metric: str, amount: int = 1) -> None:
        if metric not in self.metrics.counters():
            raise KeyError(f"Unknown session counter: {metric!r}")
        setattr(self.metrics, metric, getattr(self.metrics, metric) + amount)

    def section(self, title: str, width: int = 50) -> None:
        if self.verbose:
            rule = "─" * width
            print(f"{rule}\n  {title}\n{rule}")

    # ------------------------------------------------------------- console

    def _echo(self, record: LogRecord, nested: bool) -> None:
        if self.json_log:
            print(record.as_json())
            return

        color, icon = STYLES[record.component]
        if not self.use_colors:
            color = reset = ""
        else:
            reset = ANSI_RESET
        indent = "    " if nested else ""
        print(f"{indent}{color}{icon} [{record.component.value}] {record.message}{reset}")
        if record.data and not nested:
            details = ", ".join(f"{key}: {value}" for key, value in record.data.items())
            print(f"{indent}    {details}")

    # ---------------------------------------------------------- consultation

    def entries_for(self, component: LogLevel) -> List[LogRecord]:
        """Enregistrements d'un composant (les erreurs sont toutes sous ERROR)."""
        return [record for record in self.entries if record.component is component]

    def get_metrics_summary(self) -> Dict[str, Any]:
        summary: Dict[str, Any] = {"total_entries": len(self.entries)}
        summary.update(self.metrics.counters())
        summary["step_durations"] = dict(self.metrics.step_durations)
        summary["error_count"] = len(self.metrics.errors)
        summary["warning_count"] = len(self.metrics.warnings)
        return summary

    def print_metrics_summary(self) -> None:
        if not self.verbose:
            return

        summary = self.get_metrics_summary()
        self.section("SESSION METRICS")
        print(f"🐾 Placements: {summary['placements']} (rejected: {summary['rejections']})")
        print(f"🧹 Removals: {summary['removals']}")
        print(f"🔄 Rounds finished: {summary['rounds_finished']}")
        if self.metrics.warnings:
            print(f"⚠ {summary['warning_count']} warning(s), latest:")
            for message in self.metrics.warnings[-5:]:
                print(f"   - {message}")

    def clear(self) -> None:
        self.entries = []
        self.metrics = SessionMetrics()


_default_logger: Optional[SafariLogger] = None


def get_logger() -> SafariLogger:
    """Journal par défaut du processus (créé silencieux au premier appel)."""
    global _default_logger
    if _default_logger is None:
        _default_logger = SafariLogger()
    return _default_logger


def set_logger(logger: SafariLogger) -> None:
    global _default_logger
    _default_logger = logger


__all__ = ["LogLevel", "LogRecord", "SessionMetrics", "SafariLogger", "get_logger", "set_logger"]
