"""
validator.py - Validated background generation with bounded corrective retries.

Wraps an ImageProvider and runs each raster through three checks, in order:

  1. originality - dHash distance to the reference corpus (1 retry)
  2. text        - heuristic + optional vision classifier (2 retries)
  3. palette     - far-sample ratio against the brand palette (1 retry,
                   only when a palette is given)

A failed check regenerates with a corrective line appended to the prompt.
Retry ceilings are fixed per check and cannot be raised by callers.
Provider errors propagate; analysis errors are logged and count as a pass.

Usage:
    validator = GenerationValidator(GeminiImageGenerator(), GeminiTextClassifier())
    result = validator.generate(GenerationRequest(prompt=prompt, reference_hashes=hashes))
    result.raster, result.prompt_used, result.retry_notes()
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from rich.console import Console

from .generator import ImageProvider, VisionClassifier
from .image_hash import ReferenceHash, closest_reference, compute_dhash
from .palette_compliance import PaletteComplianceScore, score_palette_compliance
from .text_detector import detect_text

logger = logging.getLogger(__name__)
console = Console()

ORIGINALITY_DISTANCE_THRESHOLD = 6

ORIGINALITY_MAX_RETRIES = 1
TEXT_MAX_RETRIES = 2
PALETTE_MAX_RETRIES = 1

ORIGINALITY_BOOST = (
    "Originality guard: alter composition strongly from references. Change focal geometry, "
    "spacing rhythm, and tonal distribution while preserving the same overall mood."
)

# Escalating: retry N uses NO_TEXT_RETRY_BOOSTS[N - 1].
NO_TEXT_RETRY_BOOSTS = (
    "Hard requirement: absolutely no letterforms. If any characters appear, regenerate a fully abstract scene.",
    "CRITICAL NO-TEXT RETRY: zero readable text, zero glyphs, zero typographic marks. "
    "Produce pure image textures and shapes only.",
)


def palette_boost(palette: Sequence[str]) -> str:
    return (
        f"Hard palette constraint: use only these colours and their tints and shades: {', '.join(palette)}. "
        "Remove every off-palette hue; neutrals are allowed."
    )


def _join_prompt(*parts: str) -> str:
    return " ".join(p for p in parts if p)


# ── Retry state ───────────────────────────────────────────────────────────────

class RetryPhase(Enum):
    NOT_ATTEMPTED = "not_attempted"
    ATTEMPTING = "attempting"
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


@dataclass
class RetryBudget:
    """Per-check retry counter; ``retries`` never exceeds ``max_retries``."""
    category: str
    max_retries: int
    phase: RetryPhase = RetryPhase.NOT_ATTEMPTED
    retries: int = 0

    def record(self, passed: bool) -> bool:
        """Record a check result. Returns True when the caller should regenerate."""
        if passed:
            self.phase = RetryPhase.ACCEPTED
            return False
        if self.retries < self.max_retries:
            self.retries += 1
            self.phase = RetryPhase.ATTEMPTING
            return True
        self.phase = RetryPhase.EXHAUSTED
        return False

    def accept(self) -> None:
        """Take the current raster without checking it again."""
        self.phase = RetryPhase.ACCEPTED


@dataclass
class ValidationAttempt:
    category: str
    index: int
    corrective_text: str
    prompt: str
    raster: bytes = field(repr=False)
    passed: bool


# ── Request / result ──────────────────────────────────────────────────────────

@dataclass
class GenerationRequest:
    prompt: str
    size: str = "1024x1024"
    reference_images: List[bytes] = field(default_factory=list, repr=False)
    reference_hashes: Sequence[ReferenceHash] = ()
    allowed_palette: Optional[List[str]] = None
    label: str = ""


@dataclass
class ValidatedGeneration:
    raster: bytes = field(repr=False)
    prompt_used: str
    text_retry_count: int = 0
    palette_retry_count: int = 0
    palette_compliance_score: Optional[PaletteComplianceScore] = None
    originality_retried: bool = False

    def retry_notes(self) -> List[str]:
        notes: List[str] = []
        if self.originality_retried:
            notes.append("[retry: originality-guard]")
        if self.text_retry_count > 0:
            notes.append(f"[retry: no-text x{self.text_retry_count}]")
        if self.palette_retry_count > 0:
            notes.append("[retry: palette]")
        return notes


# ── Orchestrator ──────────────────────────────────────────────────────────────

class GenerationValidator:
    def __init__(self, provider: ImageProvider, classifier: Optional[VisionClassifier] = None):
        self.provider = provider
        self.classifier = classifier

    def _invoke(self, request: GenerationRequest, prompt: str) -> bytes:
        return self.provider.invoke(prompt, request.size, request.reference_images or None)

    def _record(self, request: GenerationRequest, attempt: ValidationAttempt) -> None:
        status = "pass" if attempt.passed else "fail"
        logger.info(
            f"[{request.label or 'slot'}] {attempt.category} check #{attempt.index}: {status} "
            f"| corrective: {attempt.corrective_text or '-'} | prompt: {attempt.prompt}"
        )

    def _is_original(self, raster: bytes, references: Sequence[ReferenceHash]) -> bool:
        if not references:
            return True
        try:
            match = closest_reference(compute_dhash(raster), references)
        except Exception as e:
            logger.warning(f"Originality check failed, accepting raster: {e}")
            return True
        if match is None:
            return True
        ref, distance = match
        logger.info(f"Closest reference {ref.id} at distance {distance}")
        return distance >= ORIGINALITY_DISTANCE_THRESHOLD

    def _has_text(self, raster: bytes) -> bool:
        return detect_text(raster, self.classifier.invoke if self.classifier else None)

    def _score_palette(self, raster: bytes, palette: Sequence[str]) -> Optional[PaletteComplianceScore]:
        try:
            return score_palette_compliance(raster, palette)
        except Exception as e:
            logger.warning(f"Palette scoring failed, accepting raster: {e}")
            return None

    def generate(self, request: GenerationRequest) -> ValidatedGeneration:
        """
        Produce one validated raster for a slot.

        Worst case is five provider calls: the first raster, one originality
        retry, two text retries and one palette retry.
        """
        raster = self._invoke(request, request.prompt)

        # ── 1. Originality ──
        originality = RetryBudget("originality", ORIGINALITY_MAX_RETRIES)
        passed = self._is_original(raster, request.reference_hashes)
        self._record(request, ValidationAttempt("originality", 0, "", request.prompt, raster, passed))
        originality_boost = ""
        if originality.record(passed):
            originality_boost = ORIGINALITY_BOOST
            retry_prompt = _join_prompt(request.prompt, originality_boost)
            raster = self._invoke(request, retry_prompt)
            originality.accept()
            self._record(request, ValidationAttempt("originality", 1, originality_boost, retry_prompt, raster, True))

        # ── 2. Text leakage ──
        base_prompt = _join_prompt(request.prompt, originality_boost)
        prompt_used = base_prompt
        text = RetryBudget("text", TEXT_MAX_RETRIES)
        corrective = ""
        while True:
            passed = not self._has_text(raster)
            self._record(request, ValidationAttempt("text", text.retries, corrective, prompt_used, raster, passed))
            if not text.record(passed):
                break
            corrective = NO_TEXT_RETRY_BOOSTS[text.retries - 1]
            prompt_used = _join_prompt(base_prompt, corrective)
            raster = self._invoke(request, prompt_used)
        if text.phase is RetryPhase.EXHAUSTED:
            logger.warning(f"[{request.label or 'slot'}] text still detected after {text.retries} retries; delivering last raster")

        # ── 3. Palette compliance ──
        palette_score: Optional[PaletteComplianceScore] = None
        palette = RetryBudget("palette", PALETTE_MAX_RETRIES)
        if request.allowed_palette:
            palette_score = self._score_palette(raster, request.allowed_palette)
            passed = palette_score is None or palette_score.is_compliant
            self._record(request, ValidationAttempt("palette", 0, "", prompt_used, raster, passed))
            if palette.record(passed):
                corrective = palette_boost(request.allowed_palette)
                prompt_used = _join_prompt(prompt_used, corrective)
                raster = self._invoke(request, prompt_used)
                palette_score = self._score_palette(raster, request.allowed_palette)
                passed = palette_score is None or palette_score.is_compliant
                self._record(request, ValidationAttempt("palette", 1, corrective, prompt_used, raster, passed))
                # second score is final either way
                palette.accept()
                if not passed:
                    logger.warning(
                        f"[{request.label or 'slot'}] palette still off after retry "
                        f"(far ratio {palette_score.far_sample_ratio:.2f})"
                    )

        return ValidatedGeneration(
            raster=raster,
            prompt_used=prompt_used,
            text_retry_count=text.retries,
            palette_retry_count=palette.retries,
            palette_compliance_score=palette_score,
            originality_retried=originality.retries > 0,
        )


# ── Round runner ──────────────────────────────────────────────────────────────

@dataclass
class RoundResult:
    results: Dict[int, ValidatedGeneration] = field(default_factory=dict)
    failures: Dict[int, BaseException] = field(default_factory=dict)


def generate_round(
    validator: GenerationValidator,
    requests: Mapping[int, GenerationRequest],
    max_workers: int = 3,
) -> RoundResult:
    """
    Validate every slot of a round, keyed by option index.

    Slots are independent; with max_workers > 1 they run on a thread pool.
    A slot whose provider call raised lands in ``failures`` with the
    original exception.
    """
    round_result = RoundResult()
    if not requests:
        return round_result

    def _gen_one(option_index: int, request: GenerationRequest):
        t0 = time.monotonic()
        result = validator.generate(request)
        elapsed = time.monotonic() - t0
        notes = " ".join(result.retry_notes())
        console.print(
            f"  [green]✓ Option {request.label or option_index} done[/green] "
            f"[dim]({elapsed:.1f}s{', ' + notes if notes else ''})[/dim]"
        )
        return result

    workers = max(1, min(len(requests), max_workers))
    if workers == 1:
        for option_index, request in requests.items():
            try:
                round_result.results[option_index] = _gen_one(option_index, request)
            except Exception as exc:
                console.print(f"  [red]✗ Option {request.label or option_index} failed: {exc}[/red]")
                round_result.failures[option_index] = exc
        return round_result

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(_gen_one, option_index, request): option_index
            for option_index, request in requests.items()
        }
        for future in as_completed(futures):
            option_index = futures[future]
            try:
                round_result.results[option_index] = future.result()
            except Exception as exc:
                console.print(f"  [red]✗ Option {requests[option_index].label or option_index} failed: {exc}[/red]")
                round_result.failures[option_index] = exc

    return round_result
