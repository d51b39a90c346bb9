from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from holdem.models import ActionType

# Terminal helpers for the interactive table: turn payloads from
# holdem.views.public_view into text and parse typed commands.

_ALIASES = {
    "f": ActionType.FOLD,
    "fold": ActionType.FOLD,
    "k": ActionType.CHECK,
    "check": ActionType.CHECK,
    "c": ActionType.CALL,
    "call": ActionType.CALL,
    "r": ActionType.RAISE,
    "raise": ActionType.RAISE,
    "bet": ActionType.RAISE,
    "a": ActionType.ALL_IN,
    "allin": ActionType.ALL_IN,
    "all_in": ActionType.ALL_IN,
    "all-in": ActionType.ALL_IN,
}


def parse_command(text: str) -> Tuple[ActionType, Optional[int]]:
    """Parse ``"r 60"`` style input into an action and optional raise-to amount."""
    parts = text.strip().lower().split()
    if not parts:
        raise ValueError("Empty command")
    action = _ALIASES.get(parts[0])
    if action is None:
        raise ValueError(f"Unknown command: {parts[0]}")
    amount: Optional[int] = None
    if len(parts) > 1:
        if action is not ActionType.RAISE:
            raise ValueError(f"{action.value} takes no amount")
        try:
            amount = int(parts[1])
        except ValueError as exc:
            raise ValueError(f"Invalid amount: {parts[1]}") from exc
    return action, amount


def render_table(view: Dict[str, Any]) -> str:
    lines: List[str] = [
        f"Hand #{view['hand_number']} | {str(view['phase']).upper()} | "
        f"Blinds {view['blinds']['small']}/{view['blinds']['big']} | Pot {view['pot']}"
    ]
    board = " ".join(view["community"]) or "-"
    lines.append(f"Board: {board}")
    for seat in view["seats"]:
        marker = ">" if seat["id"] == view["next_actor"] else " "
        button = "D" if seat["is_dealer"] else " "
        hole = " ".join(seat["hole"]) if seat["hole"] else "?? ??"
        status = "folded" if seat["is_folded"] else ("all-in" if seat["is_all_in"] else (seat["last_action"] or ""))
        lines.append(
            f"{marker}{button} {seat['name']:<12} {seat['chips']:>6}  bet {seat['bet']:>5}  {hole:<6} {status}"
        )
    if view.get("last_action"):
        lines.append(f"Last: {view['last_action']}")
    return "\n".join(lines)


def render_prompt(view: Dict[str, Any]) -> str:
    legal = ", ".join(view.get("legal", []))
    return (
        f"Your move [{legal}] to_call={view.get('to_call')} "
        f"raise_to={view.get('min_raise_to')}..{view.get('max_raise_to')} > "
    )


def render_results(view: Dict[str, Any]) -> str:
    names = {seat["id"]: seat["name"] for seat in view["seats"]}
    lines = []
    for winner in view.get("winners") or []:
        lines.append(f"{names.get(winner['id'], winner['id'])} wins {winner['amount']} ({winner['description']})")
    return "\n".join(lines)
