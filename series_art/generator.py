"""
generator.py - Gemini adapters for background generation and text detection.

  GeminiImageGenerator  - prompt (+ optional reference images) -> PNG bytes
  GeminiTextClassifier  - PNG bytes -> "does this contain readable text?"

Both read GEMINI_API_KEY at call time. The image adapter walks a model
ladder, skipping models the key cannot use; any other error propagates so the
caller can decide what to do with a failed slot.
"""

from __future__ import annotations

import base64
import json
import os
from typing import List, Optional, Protocol, Sequence

from google import genai
from google.genai import types
from rich.console import Console

console = Console()

# Model ladder: Nano Banana → Nano Banana Pro → legacy exp
DEFAULT_IMAGE_MODELS = [
    "gemini-2.5-flash-image",
    "gemini-3-pro-image-preview",
    "gemini-2.0-flash-exp-image-generation",
]
DEFAULT_VISION_MODEL = "gemini-2.0-flash"
DEFAULT_VISION_TIMEOUT_MS = 20000

SUPPORTED_SIZES = ("1024x1024", "1536x1024", "1024x1536")

_SIZE_HINTS = {
    "1024x1024": "Square 1:1 composition, 1024x1024.",
    "1536x1024": "Wide 3:2 landscape composition, 1536x1024.",
    "1024x1536": "Tall 2:3 portrait composition, 1024x1536.",
}

# errors that mean "this model is not available to this key", not "the call failed"
_SKIPPABLE_MODEL_ERRORS = ("not found", "permission", "not supported", "invalid")

TEXT_DETECTION_PROMPT = 'Detect readable text in this image. Return JSON only: {"hasText": true|false}.'


class ImageGenerationError(RuntimeError):
    """The provider answered but produced no usable image."""


class ImageProvider(Protocol):
    def invoke(self, prompt: str, size: str, reference_images: Optional[Sequence[bytes]] = None) -> bytes:
        ...


class VisionClassifier(Protocol):
    def invoke(self, raster: bytes) -> bool:
        ...


def _api_key() -> str:
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        raise ImageGenerationError("GEMINI_API_KEY not set")
    return api_key


def image_model_ladder() -> List[str]:
    override = os.environ.get("SERIES_ART_IMAGE_MODELS", "")
    models = [m.strip() for m in override.split(",") if m.strip()]
    return models or list(DEFAULT_IMAGE_MODELS)


def sniff_mime_type(data: bytes) -> str:
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if data[:3] == b"\xff\xd8\xff":
        return "image/jpeg"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/png"


def _extract_image(response) -> Optional[bytes]:
    for candidate in response.candidates or []:
        content = candidate.content
        for part in (content.parts if content else None) or []:
            if getattr(part, "inline_data", None) and part.inline_data.data:
                data = part.inline_data.data
                if isinstance(data, str):
                    data = base64.b64decode(data)
                return data
    return None


def _strip_fences(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("```")[1]
        if raw.startswith("json"):
            raw = raw[4:]
        raw = raw.rsplit("```", 1)[0]
    return raw.strip()


# ── Image generation ──────────────────────────────────────────────────────────

class GeminiImageGenerator:
    """ImageProvider backed by Gemini image models."""

    def __init__(self, client: Optional[genai.Client] = None, models: Optional[List[str]] = None):
        self._client = client
        self.models = models or image_model_ladder()

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=_api_key())
        return self._client

    def invoke(self, prompt: str, size: str, reference_images: Optional[Sequence[bytes]] = None) -> bytes:
        """
        Generate one raster. With reference images, a failed call is retried
        once prompt-only; a prompt-only failure propagates.
        """
        if size not in SUPPORTED_SIZES:
            raise ValueError(f"Unsupported size {size!r}; expected one of {', '.join(SUPPORTED_SIZES)}")

        if reference_images:
            try:
                return self._generate(prompt, size, reference_images)
            except Exception as e:
                console.print(f"  [yellow]⚠ Reference-guided generation failed ({e}); retrying prompt-only[/yellow]")
        return self._generate(prompt, size, None)

    def _generate(self, prompt: str, size: str, reference_images: Optional[Sequence[bytes]]) -> bytes:
        full_prompt = f"{prompt}\n\nComposition: {_SIZE_HINTS[size]}"
        contents: object = full_prompt
        if reference_images:
            parts = [types.Part.from_text(text=full_prompt)]
            for i, data in enumerate(reference_images):
                parts.append(types.Part.from_text(
                    text=(
                        f"REFERENCE #{i + 1} - inspiration for mood and craft only. "
                        "Do NOT copy its composition."
                    )
                ))
                parts.append(types.Part.from_bytes(data=data, mime_type=sniff_mime_type(data)))
            contents = parts

        response = None
        used_model = self.models[0]
        last_error: Optional[Exception] = None
        for model in self.models:
            try:
                response = self.client.models.generate_content(
                    model=model,
                    contents=contents,
                    config=types.GenerateContentConfig(
                        response_modalities=["IMAGE", "TEXT"],
                    ),
                )
                used_model = model
                break
            except Exception as e:
                if any(k in str(e).lower() for k in _SKIPPABLE_MODEL_ERRORS):
                    console.print(f"  [dim]{model} unavailable, trying next model[/dim]")
                    last_error = e
                    continue
                raise

        if response is None:
            raise ImageGenerationError(
                f"No image model available (tried {', '.join(self.models)}): {last_error}"
            ) from last_error

        data = _extract_image(response)
        if not data:
            raise ImageGenerationError(f"{used_model} returned no image")

        short = used_model.replace("gemini-", "").replace("-image-generation", "").replace("-image", "")
        console.print(f"  [green]✓ image[/green] ({short}, {size})")
        return data


# ── Vision text classifier ────────────────────────────────────────────────────

class GeminiTextClassifier:
    """VisionClassifier: asks a Gemini vision model whether a raster contains text."""

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        model: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ):
        self._client = client
        self.model = model or os.environ.get("SERIES_ART_VISION_MODEL", DEFAULT_VISION_MODEL)
        self.timeout_ms = timeout_ms or int(
            os.environ.get("SERIES_ART_VISION_TIMEOUT_MS", DEFAULT_VISION_TIMEOUT_MS)
        )

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(
                api_key=_api_key(),
                http_options=types.HttpOptions(timeout=self.timeout_ms),
            )
        return self._client

    def invoke(self, raster: bytes) -> bool:
        response = self.client.models.generate_content(
            model=self.model,
            contents=[
                types.Part.from_bytes(data=raster, mime_type=sniff_mime_type(raster)),
                types.Part.from_text(text=TEXT_DETECTION_PROMPT),
            ],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
            ),
        )
        data = json.loads(_strip_fences(response.text or ""))
        return bool(data.get("hasText")) if isinstance(data, dict) else False
