import logging
from typing import Dict

from gomoku.models import Role

logger = logging.getLogger(__name__)


class Leaderboard:
    """Process-wide win/match counters. Values only ever grow."""

    def __init__(self):
        self.p1_wins = 0
        self.p2_wins = 0
        self.matches_played = 0

    def snapshot(self) -> Dict[str, int]:
        return {
            'p1Wins': self.p1_wins,
            'p2Wins': self.p2_wins,
            'matchesPlayed': self.matches_played,
        }

    def record_result(self, winner: Role) -> Dict[str, int]:
        """Count one completed match won by `winner`."""
        winner = Role(winner)
        if winner is Role.PLAYER_ONE:
            self.p1_wins += 1
        else:
            self.p2_wins += 1
        self.matches_played += 1
        logger.info(f"[leaderboard] winner={int(winner)} totals={self.snapshot()}")
        return self.snapshot()
