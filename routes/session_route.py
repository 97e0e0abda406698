"""FastAPI routes for the thumbnail chat session."""

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from controllers.session_controller import (
	get_session,
	get_turn_image,
	remove_upload,
	reset_session,
	submit_message,
	upload_image,
)

router = APIRouter(prefix="/session")


class MessagePayload(BaseModel):
	text: str


@router.get("")
async def get_session_route(request: Request):
	try:
		return await get_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/upload")
async def upload_route(request: Request, image: UploadFile = File(...)):
	"""Attach an image to the next submission."""
	try:
		return await upload_image(request, image)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/upload")
async def remove_upload_route(request: Request):
	try:
		return await remove_upload(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/messages")
async def post_message_route(request: Request, payload: MessagePayload):
	"""Generate or edit a thumbnail for one user turn."""
	try:
		return await submit_message(request, payload.text)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/reset")
async def reset_route(request: Request):
	try:
		return await reset_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/turns/{turn_id}/image")
async def turn_image_route(request: Request, turn_id: int):
	"""Return the image bytes for the specified turn id."""
	try:
		return await get_turn_image(request, turn_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
