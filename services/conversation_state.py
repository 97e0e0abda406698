"""Append-only turn sequence for one thumbnail conversation."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from models.session_models import Turn, TurnRole


class ConversationState:
	"""Hold the ordered turns and answer the read queries the router needs."""

	def __init__(self) -> None:
		self._turns: List[Turn] = []

	def append(self, turn: Turn) -> None:
		"""Add a turn to the end of the conversation."""
		self._turns.append(turn)

	def last_bot_turn_with_image(self) -> Optional[Turn]:
		"""Return the most recent bot turn that carries an image, or None."""
		for turn in reversed(self._turns):
			if turn.role is TurnRole.BOT and turn.image is not None:
				return turn
		return None

	def recent_window(self, n: int) -> List[Turn]:
		"""Return the last `n` turns in original order."""
		if n <= 0:
			return []
		return self._turns[-n:]

	def get(self, turn_id: int) -> Turn:
		"""Return a turn by id or raise KeyError if missing."""
		for turn in self._turns:
			if turn.id == turn_id:
				return turn
		raise KeyError(f"Turn {turn_id} not found")

	@property
	def turns(self) -> Tuple[Turn, ...]:
		return tuple(self._turns)

	def __len__(self) -> int:
		return len(self._turns)

	def __iter__(self) -> Iterator[Turn]:
		return iter(tuple(self._turns))

