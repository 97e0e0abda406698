"""Prompt templates for thumbnail generation and editing."""

from __future__ import annotations

GENERATION_PREFIX = "YouTube thumbnail: "


def thumbnail_guidelines() -> str:
	"""Return the legibility and safe-zone rules shared by every prompt."""
	return (
		"GUIDELINES\n"
		"1. Instant clarity (0.3-s test)\n"
		"   - One obvious focal point; no clutter.\n"
		"   - High contrast between subject and background; avoid busy patterns.\n"
		"2. Show the payoff\n"
		"   - Make the image visually promise what happens in the first few seconds of the video.\n"
		"   - Emotional faces or before/after comparisons beat generic stills.\n"
		"3. Readable on a phone\n"
		"   - Use a bold, sans-serif font of at least 120 pt in the full-size file.\n"
		"   - Test legibility at 200 x 112 px; everything important must still be clear.\n"
		"4. Text-safe zone\n"
		"   - Keep all text at least 10% of the image width away from the left and right edges\n"
		"     and at least 10% of the image height away from the top and bottom edges."
	)


def generation_prompt(user_text: str, context_block: str = "") -> str:
	"""Wrap a fresh-generation request in the thumbnail design scaffold."""
	context = f"<CONVERSATION_CONTEXT>\n{context_block}\n</CONVERSATION_CONTEXT>\n\n" if context_block else ""
	return (
		"You are a thumbnail-design assistant.\n"
		"TASK:\n"
		"- Create a 1920 x 1080 px (16:9) image of at most 2 MB for YouTube.\n"
		"- Base the concept on the request inside <USER_PROMPT>.\n"
		"- Follow every guideline below.\n\n"
		f"{thumbnail_guidelines()}\n\n"
		f"{context}"
		"<USER_PROMPT>\n"
		f"{GENERATION_PREFIX}{user_text}\n"
		"</USER_PROMPT>"
	)


def edit_prompt(instruction: str, context_block: str = "") -> str:
	"""Wrap an edit instruction, prepending the conversation context when present."""
	context = f"{context_block}\n\n" if context_block else ""
	return (
		f"{context}"
		"You are a thumbnail-design assistant editing the provided YouTube thumbnail.\n"
		"Apply the instruction below to the image and keep everything else intact.\n\n"
		f"INSTRUCTION:\n{instruction}\n\n"
		f"{thumbnail_guidelines()}"
	)


def style_reference_instruction(user_text: str, reference_name: str) -> str:
	"""Return the instruction that transfers an uploaded image's style onto the base image."""
	return (
		f"The user uploaded a style reference image ({reference_name}). "
		"Apply its visual style (color palette, mood, lighting and overall aesthetic) "
		"to this thumbnail while preserving the thumbnail's existing subject and composition.\n"
		f"User request: {user_text}"
	)
