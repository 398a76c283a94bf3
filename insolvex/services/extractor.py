"""
Vision-model extraction of insolvency documents.

Sends the page images of one document to Gemini together with the system
prompt and turns the JSON reply into a normalized ExtractionResult.
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from google import genai
from google.genai import types

from ..config import Settings
from ..core.exceptions import APIError, InsolvexError, InvalidAPIResponseError
from ..core.json_utils import extract_json_text, try_parse_or_repair_json
from ..core.models import ExtractionResult
from ..core.normalizer import normalize_extraction
from ..core.rate_limit import RateLimitedExecutor, RetryError, create_gemini_executor
from ..core.security import (
    IMAGE_MIME_TYPES,
    check_image_size,
    sanitize_filename,
    validate_image_count,
    validate_safe_path,
)
from ..prompts import SYSTEM_PROMPT, USER_PROMPT

logger = logging.getLogger(__name__)

ImagePart = Tuple[bytes, str]


def create_client(settings: Settings) -> "genai.Client":
    """Create the shared genai client from settings."""
    return genai.Client(**settings.api_client_kwargs)


def load_images(paths: Sequence[str | Path], settings: Settings) -> List[ImagePart]:
    """
    Read and validate the page images of one document.

    Args:
        paths: Page image paths in page order
        settings: Provides the image count and size limits

    Returns:
        List of (bytes, mime_type) pairs in the same order

    Raises:
        ImageValidationError: If no images are given or one is missing or empty
        SecurityError: On unsafe paths, unsupported extensions or exceeded limits
    """
    validate_image_count(paths, settings.max_images_per_document)

    images = []
    for raw_path in paths:
        path = validate_safe_path(raw_path)
        size_mb = check_image_size(path, settings.max_image_size_mb)
        logger.debug(f"[EXTRACT] Loaded {path.name} ({size_mb:.2f} MB)")
        images.append((path.read_bytes(), IMAGE_MIME_TYPES[path.suffix.lower()]))
    return images


def parse_model_response(
    response_text: Optional[str],
    source: str = "response",
    model_used: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """
    Parse the model's reply into a JSON object.

    Returns:
        The decoded object, or None when the payload decodes to something
        other than an object (the normalizer turns that into defaults).

    Raises:
        InvalidAPIResponseError: If the text is empty or cannot be parsed
    """
    if not response_text or not response_text.strip():
        raise InvalidAPIResponseError(source, response_text or "", model_used)

    try:
        parsed = try_parse_or_repair_json(extract_json_text(response_text))
    except json.JSONDecodeError as exc:
        raise InvalidAPIResponseError(source, response_text, model_used, exc) from exc

    if not isinstance(parsed, dict):
        logger.warning(f"[EXTRACT] {source} - Response decoded to {type(parsed).__name__}, not an object")
        return None
    return parsed


class DocumentExtractor:
    """Runs one vision-model call per document through a rate-limited executor."""

    def __init__(
        self,
        client: "genai.Client",
        settings: Settings,
        executor: Optional[RateLimitedExecutor] = None
    ):
        self.client = client
        self.settings = settings
        self.executor = executor or create_gemini_executor(settings.quota_limit, settings.retry_policy)

    def _build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=SYSTEM_PROMPT,
            response_mime_type="application/json",
            max_output_tokens=self.settings.max_output_tokens
        )

    def _save_response(self, source_name: str, response_text: str) -> Optional[Path]:
        if not self.settings.debug_responses or self.settings.responses_directory is None:
            return None

        folder = Path(self.settings.responses_directory)
        folder.mkdir(parents=True, exist_ok=True)
        target = folder / sanitize_filename(f"{source_name}_extraction.txt")
        target.write_text(response_text, encoding="utf-8")
        logger.debug(f"[EXTRACT] {source_name} - Raw response saved to {target}")
        return target

    async def extract(self, images: Sequence[ImagePart], source_name: str) -> ExtractionResult:
        """
        Extract one document from its page images.

        Args:
            images: (bytes, mime_type) pairs as returned by ``load_images``
            source_name: Name used in logs, errors and saved response files

        Returns:
            Normalized ExtractionResult with ``raw_json`` set to the model text

        Raises:
            APIError: If the model call fails after all retries
            InvalidAPIResponseError: If the reply is empty or unparseable
        """
        model = self.settings.extraction_model
        contents: List[Any] = [
            types.Part.from_bytes(data=data, mime_type=mime_type)
            for data, mime_type in images
        ]
        contents.append(USER_PROMPT)
        config = self._build_config()

        async def call_model():
            logger.info(f"[EXTRACT] {source_name} - Calling {model} with {len(images)} page image(s)")
            return await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config
            )

        try:
            response = await self.executor.execute(call_model, operation_name=f"extract {source_name}")
        except RetryError as exc:
            logger.error(f"[EXTRACT] {source_name} - Model call failed: {str(exc.last_exception)[:150]}")
            raise APIError(source_name, exc.last_exception, model, exc.attempts) from exc

        response_text = response.text or ""
        self._save_response(source_name, response_text)

        parsed = parse_model_response(response_text, source_name, model)
        result = normalize_extraction(parsed, response_text)
        logger.info(f"[EXTRACT] {source_name} - Success ({result.document.doc_type})")
        return result

    async def extract_many(
        self,
        jobs: Sequence[Tuple[str, Sequence[ImagePart]]]
    ) -> Tuple[List[Tuple[str, ExtractionResult]], List[Dict[str, str]]]:
        """
        Extract several documents concurrently.

        Args:
            jobs: (source_name, images) pairs

        Returns:
            Tuple of (successful (source_name, result) pairs, failures). A
            failure is a dict with source, error_type and error_message.
        """
        if not jobs:
            return [], []

        outcomes = await asyncio.gather(
            *(self.extract(images, source_name) for source_name, images in jobs),
            return_exceptions=True
        )

        results = []
        failures = []
        for (source_name, _), outcome in zip(jobs, outcomes):
            if not isinstance(outcome, Exception):
                results.append((source_name, outcome))
                continue

            if isinstance(outcome, InsolvexError):
                failures.append(outcome.to_failure_record(source_name))
            else:
                failures.append({
                    "source": source_name,
                    "error_type": type(outcome).__name__,
                    "error_message": str(outcome)[:200],
                })
            logger.error(f"[EXTRACT ERROR] {source_name}: {str(outcome)[:100]}")

        logger.info(f"[EXTRACT] Batch done: {len(results)} succeeded, {len(failures)} failed")
        return results, failures
