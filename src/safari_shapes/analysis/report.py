"""
Bilan de session : historique des manches sous forme de DataFrame et
statistiques (meilleure manche, dispersion des scores, taux de complétion,
score par type d'objectif).
"""

from typing import Any, Dict, List, Optional

import pandas as pd

from safari_shapes.experiment.state_machine import RoundRecord


def history_frame(records: List[RoundRecord]) -> pd.DataFrame:
    """Une ligne par manche terminée, dans l'ordre de jeu."""
    if not records:
        return pd.DataFrame(columns=["round", "objective", "score", "completed", "shape_count", "condition"])
    return pd.DataFrame([r.to_dict() for r in records])


class SessionReport:
    """
    Statistiques sur l'historique des manches d'une session.

    Exemple :
        report = SessionReport(machine.history, explore_exploit=machine.explore_exploit_score)
        print(report.score_stats())
        print(report.score_by_objective())
    """

    def __init__(self, records: List[RoundRecord], explore_exploit: Optional[float] = None):
        self.df = history_frame(records)
        self.explore_exploit = explore_exploit

    # ==================== SCORES ====================

    def score_stats(self) -> Dict[str, float]:
        if self.df.empty:
            return {}
        scores = self.df["score"]
        return {
            "total": int(scores.sum()),
            "mean": float(scores.mean()),
            "max": int(scores.max()),
            "min": int(scores.min()),
            "count": int(len(scores)),
        }

    def best_round(self) -> Optional[int]:
        """Manche au meilleur score (la plus ancienne en cas d'égalité)."""
        if self.df.empty:
            return None
        ranked = self.df.sort_values(["score", "round"], ascending=[False, True])
        return int(ranked.iloc[0]["round"])

    def ranked(self) -> pd.DataFrame:
        """Scores du meilleur au moins bon, comme le tableau des scores du jeu."""
        return self.df.sort_values(["score", "round"], ascending=[False, True]).reset_index(drop=True)

    def completion_rate(self) -> float:
        if self.df.empty:
            return 0.0
        return float(self.df["completed"].astype(bool).mean())

    def score_by_objective(self) -> pd.DataFrame:
        if self.df.empty:
            return pd.DataFrame()
        grouped = self.df.groupby("objective")["score"].agg(["mean", "max", "count"]).round(2)
        grouped["completion_rate"] = self.df.groupby("objective")["completed"].mean().round(4)
        return grouped.sort_values("mean", ascending=False)

    # ==================== BILAN ====================

    def summary(self) -> Dict[str, Any]:
        return {
            "rounds": int(len(self.df)),
            "scores": self.score_stats(),
            "best_round": self.best_round(),
            "completion_rate": self.completion_rate(),
            "explore_exploit": self.explore_exploit,
        }

    def to_csv(self, path: str) -> None:
        self.df.to_csv(path, index=False)

    def print_summary(self) -> None:
        summary = self.summary()
        print("\n" + "=" * 50)
        print("  SESSION REPORT")
        print("=" * 50)
        print(f"Rounds played: {summary['rounds']}")
        if summary["scores"]:
            stats = summary["scores"]
            print(f"Total score: {stats['total']} (mean {stats['mean']:.1f}, best {stats['max']})")
            print(f"Best round: {summary['best_round']}")
        print(f"Completion rate: {summary['completion_rate']:.0%}")
        if self.explore_exploit is not None:
            print(f"Explore/exploit: {self.explore_exploit:.1f}%")
