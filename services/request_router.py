"""Decide, per user turn, whether to generate or edit and against which image.

The decision is a prioritized rule table: the first rule whose conditions all
hold wins. Cue matching is a case-insensitive substring test, so "add" also
matches "address"; that imprecision is accepted in exchange for not needing
explicit generate/edit controls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from configs.settings import Settings
from exceptions.exceptions import EmptyPromptError
from models.image_content import ImageContent
from models.session_models import PendingUpload, Turn
from services.context_builder import collect_exchanges, edit_context_block, generation_context_block
from services.conversation_state import ConversationState
from services.prompts import edit_prompt, generation_prompt, style_reference_instruction

LOGGER = logging.getLogger(__name__)

STYLE_REFERENCE_CUES: Tuple[str, ...] = ("style", "like this", "similar to", "in this style", "reference")
EDIT_INTENT_CUES: Tuple[str, ...] = (
    "edit",
    "change",
    "modify",
    "add",
    "remove",
    "make it",
    "give it",
    "now",
    "also",
)


class RequestKind(str, Enum):
    EDIT_NEW_UPLOAD = "edit_new_upload"
    STYLE_REFERENCE_EDIT = "style_reference_edit"
    FOLLOW_UP_EDIT = "follow_up_edit"
    FRESH_GENERATION = "fresh_generation"

    @property
    def is_edit(self) -> bool:
        return self is not RequestKind.FRESH_GENERATION


def matches_any(text: str, cues: Sequence[str]) -> bool:
    lowered = text.lower()
    return any(cue in lowered for cue in cues)


@dataclass(frozen=True)
class RoutingFacts:
    """What the rules look at for one submission."""

    text: str
    has_upload: bool
    has_prior_image: bool


@dataclass(frozen=True)
class RoutingRule:
    """One row of the routing table. `None` means the condition is not checked.

    Attributes:
        kind: Request kind selected when the rule matches.
        upload: Required presence of a pending upload.
        prior_image: Required presence of an earlier bot image.
        cues: Cue list tested against the user text.
        cue_expected: Whether the text must (True) or must not (False) hit `cues`.
    """

    kind: RequestKind
    upload: Optional[bool] = None
    prior_image: Optional[bool] = None
    cues: Tuple[str, ...] = ()
    cue_expected: Optional[bool] = None

    def matches(self, facts: RoutingFacts) -> bool:
        if self.upload is not None and facts.has_upload != self.upload:
            return False
        if self.prior_image is not None and facts.has_prior_image != self.prior_image:
            return False
        if self.cue_expected is not None and matches_any(facts.text, self.cues) != self.cue_expected:
            return False
        return True


ROUTING_RULES: Tuple[RoutingRule, ...] = (
    RoutingRule(RequestKind.EDIT_NEW_UPLOAD, upload=True, cues=STYLE_REFERENCE_CUES, cue_expected=False),
    RoutingRule(
        RequestKind.STYLE_REFERENCE_EDIT,
        upload=True,
        prior_image=True,
        cues=STYLE_REFERENCE_CUES,
        cue_expected=True,
    ),
    RoutingRule(RequestKind.FOLLOW_UP_EDIT, upload=False, prior_image=True, cues=EDIT_INTENT_CUES, cue_expected=True),
    RoutingRule(RequestKind.FRESH_GENERATION),
)


def classify_request(
    text: str,
    *,
    has_upload: bool,
    has_prior_image: bool,
    rules: Sequence[RoutingRule] = ROUTING_RULES,
) -> RequestKind:
    """Return the kind of the first rule matching the submission."""
    facts = RoutingFacts(text=text, has_upload=has_upload, has_prior_image=has_prior_image)
    for rule in rules:
        if rule.matches(facts):
            return rule.kind
    return RequestKind.FRESH_GENERATION


@dataclass(frozen=True)
class RoutedRequest:
    """Everything needed to issue exactly one image API call."""

    kind: RequestKind
    prompt: str
    base_image: Optional[ImageContent] = None
    reference_image: Optional[ImageContent] = None

    @property
    def is_edit(self) -> bool:
        return self.kind.is_edit


def materialize_turn_image(turn: Turn) -> ImageContent:
    """Copy a bot turn's image into fresh binary content for an edit upload."""
    if turn.image is None:
        raise ValueError(f"Turn {turn.id} carries no image.")
    source = turn.image
    extension = source.mime_type.split("/")[-1].replace("jpeg", "jpg")
    return ImageContent(data=bytes(source.data), mime_type=source.mime_type, filename=f"thumbnail-{turn.id}.{extension}")


class RequestRouter:
    """Classify a submission and assemble its context-augmented prompt."""

    def __init__(self, settings: Settings, rules: Sequence[RoutingRule] = ROUTING_RULES) -> None:
        self.settings = settings
        self.rules = rules

    def route(
        self,
        user_text: str,
        pending_upload: Optional[PendingUpload],
        conversation: ConversationState,
    ) -> RoutedRequest:
        """Return the single request to send for this submission.

        `conversation` must not yet contain the current user turn.

        Raises:
            EmptyPromptError: If `user_text` is blank.
        """
        if not user_text or not user_text.strip():
            raise EmptyPromptError("Please describe the thumbnail you want.")

        last_bot_image_turn = conversation.last_bot_turn_with_image()
        recent_turns = conversation.recent_window(self.settings.context_window)
        exchanges = collect_exchanges(recent_turns, self.settings.max_context_exchanges)

        kind = classify_request(
            user_text,
            has_upload=pending_upload is not None,
            has_prior_image=last_bot_image_turn is not None,
            rules=self.rules,
        )
        LOGGER.info("Routing submission as %s (history exchanges: %d)", kind.value, len(exchanges))

        if kind is RequestKind.FRESH_GENERATION:
            return RoutedRequest(kind=kind, prompt=generation_prompt(user_text, generation_context_block(exchanges)))

        context = edit_context_block(exchanges)
        if kind is RequestKind.EDIT_NEW_UPLOAD and pending_upload is not None:
            return RoutedRequest(kind=kind, prompt=edit_prompt(user_text, context), base_image=pending_upload.image)

        if kind is RequestKind.STYLE_REFERENCE_EDIT and pending_upload is not None and last_bot_image_turn is not None:
            instruction = style_reference_instruction(user_text, pending_upload.filename)
            return RoutedRequest(
                kind=kind,
                prompt=edit_prompt(instruction, context),
                base_image=materialize_turn_image(last_bot_image_turn),
                reference_image=pending_upload.image,
            )

        if kind is RequestKind.FOLLOW_UP_EDIT and last_bot_image_turn is not None:
            return RoutedRequest(
                kind=kind,
                prompt=edit_prompt(user_text, context),
                base_image=materialize_turn_image(last_bot_image_turn),
            )

        raise ValueError(f"Request kind {kind.value} does not match the session state.")
