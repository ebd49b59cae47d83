"""
Rules constants for Naruto Mythos.

Anything a variant might tune lives here rather than in the phase code.
"""

BASE_CHAKRA = 5
HIDDEN_PLAY_COST = 1
INITIAL_HAND_SIZE = 5
CARDS_DRAWN_PER_TURN = 2

MIN_DECK_SIZE = 30
MAX_COPIES_PER_VERSION = 2
MISSION_CARDS_PER_PLAYER = 3
MISSIONS_SELECTED_PER_PLAYER = 2

TOTAL_TURNS = 4

PLAYER_IDS = ("player1", "player2")

# Turn number -> (rank, rank bonus)
MISSION_RANKS = {
    1: ("D", 1),
    2: ("C", 2),
    3: ("B", 3),
    4: ("A", 4),
}

# Scoring order inside the mission phase
RANK_ORDER = ("D", "C", "B", "A")

DEFAULT_MISSION_BASE_POINTS = 1


def opponent_of(player_id: str) -> str:
    """Return the other seat."""
    return "player2" if player_id == "player1" else "player1"
