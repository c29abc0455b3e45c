from typing import Iterable

LACHLAN = 'lachlan'
LEIGH = 'leigh'
PLAYERS = (LACHLAN, LEIGH)


def is_valid_player(player) -> bool:
    return player in PLAYERS


def other_player(player: str) -> str:
    """Return the partner of ``player``."""
    return LEIGH if player == LACHLAN else LACHLAN


def is_valid_answer(answer, choices: Iterable[str]) -> bool:
    return isinstance(answer, str) and answer in tuple(choices)


def empty_slots() -> dict:
    """One unset slot per player."""
    return {p: None for p in PLAYERS}
