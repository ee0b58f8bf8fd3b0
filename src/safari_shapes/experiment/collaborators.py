"""
Collaborateurs externes de la machine à états.

Le minuteur, le signal de présence (micro) et le puits de notifications ne
font pas partie du cœur : ils sont décrits ici par des interfaces abstraites,
avec des implémentations manuelles pour la démo CLI et les tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from safari_shapes.utils.logger import LogLevel, SafariLogger, get_logger

Callback = Callable[[], None]


class Severity(Enum):
    INFO = "info"
    SUCCESS = "success"
    DESTRUCTIVE = "destructive"


class Notifier(ABC):
    """Puits de messages destinés au joueur (toasts)."""

    @abstractmethod
    def notify(self, title: str, message: str, severity: Severity = Severity.INFO) -> None:
        """Affiche un message."""


class CountdownTimer(ABC):
    """Compte à rebours externe qui rappelle `on_expire` à l'échéance."""

    @abstractmethod
    def start(self, duration: float, on_expire: Callback) -> None:
        """Démarre (ou redémarre) le compte à rebours."""

    @abstractmethod
    def stop(self) -> None:
        """Arrête le compte à rebours sans déclencher `on_expire`."""

    @abstractmethod
    def pause(self) -> None:
        """Suspend le décompte."""

    @abstractmethod
    def resume(self) -> None:
        """Reprend le décompte."""


class LivenessSignal(ABC):
    """Source de présence du joueur ; demande pause / reprise de la manche."""

    @abstractmethod
    def start(self, on_pause: Callback, on_resume: Callback) -> None:
        """Commence à écouter."""

    @abstractmethod
    def stop(self) -> None:
        """Libère l'écoute."""


@dataclass
class Notification:
    title: str
    message: str
    severity: Severity


class LoggingNotifier(Notifier):
    """Conserve les notifications et les trace dans le logger."""

    def __init__(self, logger: Optional[SafariLogger] = None):
        self.logger = logger or get_logger()
        self.notifications: List[Notification] = []

    def notify(self, title: str, message: str, severity: Severity = Severity.INFO) -> None:
        self.notifications.append(Notification(title, message, severity))
        if severity is Severity.DESTRUCTIVE:
            self.logger.warning(LogLevel.EXPERIMENT, f"{title}: {message}")
        else:
            self.logger.step(LogLevel.EXPERIMENT, f"{title}: {message}")

    @property
    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    def titles(self) -> List[str]:
        return [n.title for n in self.notifications]


class ManualTimer(CountdownTimer):
    """Minuteur piloté à la main via `tick(seconds)`."""

    def __init__(self):
        self.remaining: Optional[float] = None
        self.paused = False
        self._on_expire: Optional[Callback] = None

    @property
    def running(self) -> bool:
        return self.remaining is not None

    def start(self, duration: float, on_expire: Callback) -> None:
        self.remaining = float(duration)
        self.paused = False
        self._on_expire = on_expire

    def stop(self) -> None:
        self.remaining = None
        self.paused = False
        self._on_expire = None

    def pause(self) -> None:
        if self.running:
            self.paused = True

    def resume(self) -> None:
        self.paused = False

    def tick(self, seconds: float) -> None:
        """Fait avancer le temps ; déclenche `on_expire` une seule fois à zéro."""
        if not self.running or self.paused:
            return
        self.remaining = max(self.remaining - seconds, 0.0)
        if self.remaining == 0.0:
            callback = self._on_expire
            self.stop()
            if callback is not None:
                callback()


class ManualLivenessSignal(LivenessSignal):
    """Signal de présence déclenché à la main (silence / activité)."""

    def __init__(self):
        self.listening = False
        self._on_pause: Optional[Callback] = None
        self._on_resume: Optional[Callback] = None

    def start(self, on_pause: Callback, on_resume: Callback) -> None:
        self.listening = True
        self._on_pause = on_pause
        self._on_resume = on_resume

    def stop(self) -> None:
        self.listening = False
        self._on_pause = None
        self._on_resume = None

    def silence(self) -> None:
        if self.listening and self._on_pause:
            self._on_pause()

    def activity(self) -> None:
        if self.listening and self._on_resume:
            self._on_resume()


__all__ = [
    "Severity",
    "Notifier",
    "CountdownTimer",
    "LivenessSignal",
    "Notification",
    "LoggingNotifier",
    "ManualTimer",
    "ManualLivenessSignal",
]
