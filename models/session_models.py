"""Session domain models for the thumbnail conversation."""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

from models.image_content import ImageContent

if TYPE_CHECKING:
	from services.conversation_state import ConversationState

_turn_ids = itertools.count(1)


def next_turn_id() -> int:
	"""Return a process-wide, strictly increasing turn id."""
	return next(_turn_ids)


class TurnRole(str, Enum):
	USER = "user"
	BOT = "bot"


class SessionPhase(str, Enum):
	IDLE = "idle"
	SUBMITTING = "submitting"


@dataclass(frozen=True)
class Turn:
	"""One user or bot contribution; immutable once created."""

	role: TurnRole
	text: str = ""
	image: Optional[ImageContent] = None
	usage: Optional[Dict[str, Any]] = None
	id: int = field(default_factory=next_turn_id)
	created_at: float = field(default_factory=lambda: time.time())


@dataclass(frozen=True)
class PendingUpload:
	"""The single user-selected image waiting for the next submission."""

	image: ImageContent

	@property
	def preview(self) -> str:
		return self.image.to_data_url()

	@property
	def filename(self) -> str:
		return self.image.filename


@dataclass
class SessionState:
	"""Transient input state around the conversation for one running instance."""

	conversation: ConversationState
	pending_upload: Optional[PendingUpload] = None
	pending_text: str = ""
	in_flight: bool = False
	editing: bool = False
	last_error: Optional[str] = None

	@property
	def phase(self) -> SessionPhase:
		return SessionPhase.SUBMITTING if self.in_flight else SessionPhase.IDLE

