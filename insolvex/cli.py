"""Command line entry point for insolvency document extraction."""
import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError
from tqdm import tqdm

from .config import Settings
from .core.exceptions import ConfigurationError, InsolvexError, InvalidAPIResponseError
from .core.matching import best_match_for_extraction
from .core.models import Company, ExtractionResult
from .core.normalizer import normalize_extraction
from .logging_config import setup_logging
from .services.extractor import DocumentExtractor, create_client, load_images, parse_model_response

LOGS_FOLDER = "logs"

logger = logging.getLogger(__name__)


def _write_result(result: ExtractionResult, output: Optional[Path]) -> None:
    text = json.dumps(result.to_json_dict(), ensure_ascii=False, indent=2)
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info(f"Result written to {output}")


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise InsolvexError(f"Cannot read JSON from {path}: {exc}", {"file_path": str(path)}) from exc


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except ValidationError as exc:
        raise ConfigurationError("GEMINI_API_KEY", str(exc.errors()[0]["msg"])) from exc


def run_extract(args: argparse.Namespace) -> int:
    """Extract one document from its page images."""
    settings = _load_settings()
    if settings.use_vertex_ai:
        logger.info(
            f"Using Vertex AI - Project: {settings.google_cloud_project}, "
            f"Location: {settings.google_cloud_location}"
        )
    else:
        logger.info("Using regular Gemini API")

    images = load_images(args.images, settings)
    extractor = DocumentExtractor(create_client(settings), settings)
    source_name = Path(args.images[0]).stem

    start_time = time.time()
    result = asyncio.run(extractor.extract(images, source_name))
    logger.info(f"Extraction of {source_name} took {time.time() - start_time:.2f} seconds")

    _write_result(result, Path(args.output) if args.output else None)
    return 0


def run_normalize(args: argparse.Namespace) -> int:
    """Re-normalize saved raw model responses without calling the model."""
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    degraded = 0
    with tqdm(total=len(args.raw), desc=f"Normalizing {len(args.raw)} responses", unit="file") as pbar:
        for raw_file in args.raw:
            raw_path = Path(raw_file)
            try:
                text = raw_path.read_text(encoding="utf-8")
            except OSError as exc:
                raise InsolvexError(f"Cannot read {raw_path}: {exc}", {"file_path": str(raw_path)}) from exc

            try:
                parsed = parse_model_response(text, raw_path.name)
            except InvalidAPIResponseError as exc:
                logger.warning(f"{raw_path.name} - Unparseable, writing defaults: {str(exc)[:100]}")
                parsed = None
                degraded += 1

            result = normalize_extraction(parsed, text)
            _write_result(result, output_dir / f"{raw_path.stem}.json")
            pbar.set_postfix_str(raw_path.name)
            pbar.update(1)

    logger.info(f"Normalized {len(args.raw)} responses ({degraded} degraded to defaults)")
    return 0


def run_match(args: argparse.Namespace) -> int:
    """Print the id of the company an extraction belongs to."""
    extraction = normalize_extraction(_read_json(Path(args.extraction)))

    raw_companies = _read_json(Path(args.companies))
    if not isinstance(raw_companies, list):
        raise InsolvexError(f"{args.companies} must hold a JSON array of companies")
    try:
        companies = [Company.model_validate(item) for item in raw_companies]
    except ValidationError as exc:
        raise InsolvexError(f"Invalid company record in {args.companies}: {exc}") from exc

    company = best_match_for_extraction(companies, extraction)
    print(company.id if company else "no match")
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--logs', default=LOGS_FOLDER,
                        help=f'Logs folder (default: {LOGS_FOLDER})')

    parser = argparse.ArgumentParser(
        prog="insolvex",
        description="Extract structured data from Romanian insolvency documents"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", parents=[common], help="Extract one document from its page images")
    extract.add_argument("images", nargs="+", help="Page images of one document, in page order")
    extract.add_argument("--output", help="Write the normalized JSON here (default: stdout)")
    extract.set_defaults(handler=run_extract)

    normalize = subparsers.add_parser("normalize", parents=[common], help="Re-normalize saved raw model responses")
    normalize.add_argument("raw", nargs="+", help="Saved raw response files")
    normalize.add_argument("--output-dir", required=True, help="Folder for the normalized JSON files")
    normalize.set_defaults(handler=run_normalize)

    match = subparsers.add_parser("match", parents=[common], help="Find the company an extraction belongs to")
    match.add_argument("extraction", help="Extraction JSON file")
    match.add_argument("--companies", required=True, help="JSON array of known companies")
    match.set_defaults(handler=run_match)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(Path(args.logs))

    try:
        return args.handler(args)
    except InsolvexError as exc:
        logger.error(f"{type(exc).__name__}: {exc.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
