"""Build conversation-context blocks for thumbnail prompts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from models.session_models import Turn, TurnRole


@dataclass(frozen=True)
class Exchange:
    """A user request answered by a bot turn that carries an image."""

    request: Turn
    reply: Turn


def collect_exchanges(turns: Sequence[Turn], limit: int = 3) -> List[Exchange]:
    """Return up to `limit` of the latest user/bot-with-image pairs, oldest first.

    Only a user turn immediately followed by a bot turn with an image qualifies;
    unanswered requests and text-only replies are skipped.
    """
    if limit <= 0:
        return []
    exchanges: List[Exchange] = []
    for current, following in zip(turns, turns[1:]):
        if current.role is not TurnRole.USER:
            continue
        if following.role is TurnRole.BOT and following.image is not None:
            exchanges.append(Exchange(request=current, reply=following))
    return exchanges[-limit:]


def _history_lines(exchanges: Sequence[Exchange]) -> List[str]:
    return [f"Previous request: {exchange.request.text.strip()}" for exchange in exchanges]


def generation_context_block(exchanges: Sequence[Exchange]) -> str:
    """Return the continuity block for a fresh generation, or "" without history."""
    if not exchanges:
        return ""
    lines = ["This thumbnail continues an ongoing conversation. Earlier requests, oldest first:"]
    lines.extend(_history_lines(exchanges))
    lines.append(
        "Keep the series consistent with these earlier thumbnails where it makes sense, "
        "but the current request below is authoritative and overrides anything above."
    )
    return "\n".join(lines)


def edit_context_block(exchanges: Sequence[Exchange]) -> str:
    """Return the preservation block for an edit, or "" without history."""
    if not exchanges:
        return ""
    lines = ["Context from our conversation so far, oldest first:"]
    lines.extend(_history_lines(exchanges))
    lines.append(
        "Preserve every element established by these earlier requests (subject, layout, "
        "text, colors) and apply only the new instruction below."
    )
    return "\n".join(lines)
