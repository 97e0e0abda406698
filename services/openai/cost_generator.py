"""Price the usage record returned by the Images API."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

PER_MILLION = 1_000_000


@dataclass(frozen=True)
class ImageTokenRates:
	"""USD per million tokens for one image model."""

	text_input: float
	image_input: float
	output: float


IMAGE_MODEL_RATES: Dict[str, ImageTokenRates] = {
	"gpt-image-1": ImageTokenRates(text_input=5.0, image_input=10.0, output=40.0),
	"gpt-image-1-mini": ImageTokenRates(text_input=2.0, image_input=2.5, output=8.0),
}


def _token_count(record: Any, key: str) -> int:
	if record is None:
		return 0
	value = record.get(key) if isinstance(record, Mapping) else getattr(record, key, None)
	try:
		return max(int(value or 0), 0)
	except (TypeError, ValueError):
		return 0


class CostGenerator:
	"""Estimate the USD cost of one generate or edit call.

	The usage record carries `input_tokens`, `output_tokens` and, for image
	models, `input_tokens_details` splitting the input into text and image
	tokens. Image input only occurs on edits, where the base image is billed
	at the higher image rate. Without the split all input is priced as text.
	"""

	def __init__(self, rates: Optional[Mapping[str, ImageTokenRates]] = None) -> None:
		self.rates = dict(rates or IMAGE_MODEL_RATES)

	def estimate_usage(self, usage: Any, model: str) -> Dict[str, Any]:
		"""Return a cost breakdown; every cost is 0.0 when usage or the model's rates are missing."""
		model_key = model.lower()
		input_tokens = _token_count(usage, "input_tokens")
		output_tokens = _token_count(usage, "output_tokens")

		details = usage.get("input_tokens_details") if isinstance(usage, Mapping) else getattr(usage, "input_tokens_details", None)
		if details:
			text_tokens = _token_count(details, "text_tokens")
			image_tokens = _token_count(details, "image_tokens")
		else:
			text_tokens, image_tokens = input_tokens, 0

		rates = self.rates.get(model_key)
		if rates is None:
			input_cost = output_cost = 0.0
		else:
			input_cost = (text_tokens * rates.text_input + image_tokens * rates.image_input) / PER_MILLION
			output_cost = output_tokens * rates.output / PER_MILLION

		return {
			"model": model_key,
			"input_tokens": input_tokens,
			"text_input_tokens": text_tokens,
			"image_input_tokens": image_tokens,
			"output_tokens": output_tokens,
			"input_cost": round(input_cost, 8),
			"output_cost": round(output_cost, 8),
			"total_cost": round(input_cost + output_cost, 8),
		}
