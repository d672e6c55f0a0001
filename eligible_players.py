from __future__ import annotations

from typing import Iterable

from cfc_models import Player


def is_regular_rated(player: Player) -> bool:
    return player.regular_rating is not None and player.regular_rating > 0


def build_eligible_set(players: Iterable[Player]) -> set[str]:
    """Ids of players holding a positive regular rating."""
    return {p.player_id for p in players if is_regular_rated(p)}
