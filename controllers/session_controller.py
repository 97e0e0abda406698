"""Session lifecycle helpers for the thumbnail chat."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request, UploadFile
from fastapi.responses import Response

from exceptions.exceptions import EmptyPromptError, InvalidImageError, SubmissionInProgressError
from models.session_models import SessionState, Turn
from services.session_store import SessionStore
from services.submission import FALLBACK_ERROR, SubmissionHandler
from utils.media_validation import read_image_upload


def _store(request: Request) -> SessionStore:
	return request.app.state.session_store


def _turn_view(turn: Turn) -> Dict[str, Any]:
	return {
		"id": turn.id,
		"role": turn.role.value,
		"text": turn.text,
		"created_at": turn.created_at,
		"image_url": f"/session/turns/{turn.id}/image" if turn.image is not None else None,
	}


def _status_message(state: SessionState) -> str | None:
	if not state.in_flight:
		return None
	return "Editing your thumbnail..." if state.editing else "Generating your thumbnail..."


def session_snapshot(state: SessionState) -> Dict[str, Any]:
	"""Return the JSON view of the session for the UI."""
	upload = state.pending_upload
	return {
		"phase": state.phase.value,
		"in_flight": state.in_flight,
		"status": _status_message(state),
		"last_error": state.last_error,
		"pending_upload": {"filename": upload.filename, "preview": upload.preview} if upload else None,
		"turns": [_turn_view(turn) for turn in state.conversation],
	}


async def get_session(request: Request) -> Dict[str, Any]:
	return session_snapshot(_store(request).state)


async def upload_image(request: Request, image: UploadFile) -> Dict[str, Any]:
	"""Validate an image file and make it the pending upload."""
	try:
		content = await read_image_upload(image)
	except InvalidImageError as exc:
		raise HTTPException(status_code=415, detail=str(exc)) from exc
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	upload = _store(request).set_upload(content)
	return {"filename": upload.filename, "mime_type": upload.image.mime_type, "preview": upload.preview}


async def remove_upload(request: Request) -> Dict[str, Any]:
	store = _store(request)
	store.remove_upload()
	return session_snapshot(store.state)


async def submit_message(request: Request, text: str) -> Dict[str, Any]:
	"""Submit one user turn and return the bot turn, or raise with the error string."""
	handler: SubmissionHandler = request.app.state.submission_handler
	try:
		outcome = await handler.submit(text)
	except EmptyPromptError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	except SubmissionInProgressError as exc:
		raise HTTPException(status_code=409, detail=str(exc)) from exc

	if outcome.bot_turn is None:
		raise HTTPException(status_code=502, detail=outcome.error or FALLBACK_ERROR)
	return {
		"turn": _turn_view(outcome.bot_turn),
		"usage": outcome.bot_turn.usage,
		"cost": outcome.cost,
	}


async def reset_session(request: Request) -> Dict[str, Any]:
	"""Discard the conversation and start over."""
	try:
		state = _store(request).reset()
	except SubmissionInProgressError as exc:
		raise HTTPException(status_code=409, detail=str(exc)) from exc
	return session_snapshot(state)


async def get_turn_image(request: Request, turn_id: int) -> Response:
	"""Return the raw image bytes attached to a turn."""
	try:
		turn = _store(request).conversation.get(int(turn_id))
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	if turn.image is None:
		raise HTTPException(status_code=404, detail="Image not available for this turn")
	return Response(content=turn.image.data, media_type=turn.image.mime_type)
