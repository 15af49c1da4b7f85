"""
Command-line entry point for summarizing a lecture PDF
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from lecture_summarizer.config import Config
from lecture_summarizer.models.summary_job import MODES, summarize_lecture
from lecture_summarizer.pdf_handler import ORIENTATIONS

config = Config()
log = logging.getLogger(__name__)


def configure_logging() -> None:
    log_level = (
        logging.DEBUG
        if os.environ.get("LECTURE_DEBUG", "").lower() == "true"
        else logging.INFO
    )
    log_file = os.environ.get("LECTURE_LOG_FILE")
    if log_file:
        logging.basicConfig(
            level=log_level,
            filename=log_file,
            filemode="w",
            format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        logging.basicConfig(
            level=log_level,
            format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lecture-summarizer",
        description="Summarize a PDF lecture with a Bedrock-hosted model.",
    )
    parser.add_argument("pdf", type=Path, help="Path to the lecture PDF")
    parser.add_argument("--mode", choices=MODES, default="images")
    parser.add_argument("--orientation", choices=ORIENTATIONS, default="portrait")
    parser.add_argument("--region", help="AWS region for Bedrock (overrides saved settings)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    config.load()
    if args.region:
        config.AWS_REGION = args.region

    try:
        pdf_bytes = args.pdf.read_bytes()
    except OSError as e:
        log.error(f"Cannot read {args.pdf}: {e}")
        return 1

    # Suffix stands in for the upload's declared content type
    content_type = "application/pdf" if args.pdf.suffix.lower() == ".pdf" else ""
    result = asyncio.run(
        summarize_lecture(
            pdf_bytes,
            file_name=args.pdf.name,
            content_type=content_type,
            orientation=args.orientation,
            mode=args.mode,
        )
    )

    if not result.success:
        print(result.error_message, file=sys.stderr)
        return 1

    print(result.summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
