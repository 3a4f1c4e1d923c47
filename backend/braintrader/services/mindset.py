"""
Mindset coaching content for Braintrader

A fixed rotation of trading-psychology tips, advanced every
``rotation_seconds``, plus the daily mantra shown next to the journal.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Tip:
    title: str
    body: str


TIPS: Tuple[Tip, ...] = (
    Tip("Avoid FOMO", "The market will always be there tomorrow. Don't chase a trade that has already left the station."),
    Tip("Risk First", "Never enter a trade without knowing exactly where you will exit if you are wrong."),
    Tip("Detach from Outcome", "Focus on the process, not the money. A losing trade can still be a 'good' trade if you followed your plan."),
    Tip("Revenge Trading", "If you feel angry after a loss, close your platform. Your emotions are now your biggest liability."),
    Tip("Size Matters", "If you can't sleep because of a position, your size is too big. Scale down until you are indifferent."),
)

DAILY_MANTRA = (
    "I am a professional risk manager who happens to trade. I follow my plan, "
    "manage my emotions, and accept that outcomes are probabilistic."
)


def current_tip(now_ms: int, rotation_seconds: int = 10) -> Tip:
    """Tip on display at ``now_ms``"""
    if rotation_seconds <= 0:
        raise ValueError("rotation_seconds must be > 0")
    index = (now_ms // (rotation_seconds * 1000)) % len(TIPS)
    return TIPS[index]
