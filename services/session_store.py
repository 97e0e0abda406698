"""In-memory store for the single thumbnail chat session."""

from __future__ import annotations

from typing import Optional

from exceptions.exceptions import SubmissionInProgressError
from models.image_content import ImageContent
from models.session_models import PendingUpload, SessionState, Turn
from services.conversation_state import ConversationState


class SessionStore:
	"""Own the session aggregate and expose its only valid transitions.

	The session moves between idle and submitting. Both exits from submitting
	(`complete` and `fail`) are followed by `finish`, which clears pending input.
	"""

	def __init__(self) -> None:
		self._state = self._new_state()

	@staticmethod
	def _new_state() -> SessionState:
		return SessionState(conversation=ConversationState())

	@property
	def state(self) -> SessionState:
		return self._state

	@property
	def conversation(self) -> ConversationState:
		return self._state.conversation

	def reset(self) -> SessionState:
		"""Discard the current session and start an empty one."""
		if self._state.in_flight:
			raise SubmissionInProgressError("Cannot reset while a submission is in progress.")
		self._state = self._new_state()
		return self._state

	def set_upload(self, image: ImageContent) -> PendingUpload:
		"""Replace the pending upload with a newly selected image."""
		upload = PendingUpload(image=image)
		self._state.pending_upload = upload
		self._state.last_error = None
		return upload

	def remove_upload(self) -> None:
		self._state.pending_upload = None

	def begin_submission(self, text: str) -> Optional[PendingUpload]:
		"""Enter the submitting phase and return the upload that goes with it.

		Check and set happen without an await in between, so one event loop never
		sees two submissions in flight.
		"""
		state = self._state
		if state.in_flight:
			raise SubmissionInProgressError("A submission is already in progress.")
		state.in_flight = True
		state.pending_text = text
		state.last_error = None
		return state.pending_upload

	def mark_routed(self, editing: bool) -> None:
		"""Record whether the in-flight submission edits an image or generates one."""
		self._state.editing = editing

	def complete(self, user_turn: Turn, bot_turn: Turn) -> SessionState:
		"""Record a successful exchange."""
		self._state.conversation.append(user_turn)
		self._state.conversation.append(bot_turn)
		return self._state

	def fail(self, message: str) -> SessionState:
		"""Record the user-visible error of a failed submission."""
		self._state.last_error = message
		return self._state

	def finish(self) -> SessionState:
		"""Return to idle and clear pending input, whatever the outcome."""
		state = self._state
		state.in_flight = False
		state.editing = False
		state.pending_text = ""
		state.pending_upload = None
		return state
