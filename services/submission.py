"""Run one thumbnail submission from routing to the appended turns."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from configs.settings import Settings
from exceptions.exceptions import EmptyPromptError, ThumbnailChatError
from models.session_models import Turn, TurnRole
from services.format_normalizer import FormatNormalizer
from services.openai.cost_generator import CostGenerator
from services.openai.image_service import GeneratedImage, ThumbnailImageService
from services.request_router import RequestRouter, RoutedRequest
from services.session_store import SessionStore

LOGGER = logging.getLogger(__name__)

EDITED_CAPTION = "Here's your edited thumbnail:"
GENERATED_CAPTION = "Here's your generated thumbnail:"
FALLBACK_ERROR = "Failed to process image"


@dataclass(frozen=True)
class SubmissionOutcome:
	"""Result of one submission: a bot turn on success, an error string otherwise."""

	bot_turn: Optional[Turn] = None
	error: Optional[str] = None
	cost: Optional[Dict[str, Any]] = None

	@property
	def ok(self) -> bool:
		return self.error is None


class SubmissionHandler:
	"""Submission boundary: every failure inside ends here as one error string."""

	def __init__(
		self,
		store: SessionStore,
		settings: Settings,
		service: ThumbnailImageService,
		router: Optional[RequestRouter] = None,
		normalizer: Optional[FormatNormalizer] = None,
		cost_generator: Optional[CostGenerator] = None,
	) -> None:
		self.store = store
		self.settings = settings
		self.service = service
		self.router = router or RequestRouter(settings)
		self.normalizer = normalizer or FormatNormalizer()
		self.cost_generator = cost_generator or CostGenerator()

	async def submit(self, text: str) -> SubmissionOutcome:
		"""Route and send one user turn.

		Raises:
			EmptyPromptError: If `text` is blank; the session is not touched.
			SubmissionInProgressError: If another submission is in flight.
		"""
		if not text or not text.strip():
			raise EmptyPromptError("Please describe the thumbnail you want.")

		upload = self.store.begin_submission(text)
		try:
			routed = self.router.route(text, upload, self.store.conversation)
			self.store.mark_routed(routed.is_edit)
			result = await self._send(routed)
			user_turn = Turn(role=TurnRole.USER, text=text, image=upload.image if upload else None)
			bot_turn = Turn(
				role=TurnRole.BOT,
				text=EDITED_CAPTION if routed.is_edit else GENERATED_CAPTION,
				image=result.image,
				usage=result.usage,
			)
			self.store.complete(user_turn, bot_turn)
			cost = self.cost_generator.estimate_usage(result.usage, self.settings.image_model)
			return SubmissionOutcome(bot_turn=bot_turn, cost=cost)
		except ThumbnailChatError as exc:
			LOGGER.error("Submission failed: %s", exc)
			self.store.fail(str(exc))
			return SubmissionOutcome(error=str(exc))
		except Exception:
			LOGGER.exception("Unexpected error while processing a submission")
			self.store.fail(FALLBACK_ERROR)
			return SubmissionOutcome(error=FALLBACK_ERROR)
		finally:
			self.store.finish()

	async def _send(self, routed: RoutedRequest) -> GeneratedImage:
		if routed.base_image is None:
			return await self.service.generate(routed.prompt)
		# Pillow is blocking.
		base_image = await asyncio.to_thread(self.normalizer.normalize, routed.base_image)
		return await self.service.edit(base_image, routed.prompt)
