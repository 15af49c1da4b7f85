"""Configuration singleton for the lecture summarizer."""

import json
import os
from pathlib import Path
from typing import Any, Optional

import boto3


class Config:
    """Singleton configuration class."""

    _instance: Optional["Config"] = None
    _CONFIG_FILE_PATH = (
        Path.home() / ".config" / "lecture-summarizer" / "lecture-summarizer.json"
    )

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _update_client(self) -> None:
        """Drop the cached Bedrock client so the next access rebuilds it."""
        self._client = None

    def _initialize(self):
        """Initialize all configuration values."""
        # Model Configuration - read from environment variables with defaults
        self._model_id = os.environ.get(
            "LECTURE_MODEL_ID", "anthropic.claude-3-5-sonnet-20241022-v2:0"
        )
        self._aws_region = os.environ.get(
            "LECTURE_AWS_REGION", os.environ.get("AWS_REGION", "us-east-1")
        )
        self._client: Any = None

        self.ANTHROPIC_VERSION = os.environ.get(
            "LECTURE_ANTHROPIC_VERSION", "bedrock-2023-05-31"
        )
        self.TEXT_MAX_TOKENS = 1000
        self.IMAGE_MAX_TOKENS = 2000
        self.IMAGE_MEDIA_TYPE = "image/jpeg"

        # Rendering Configuration
        self.PAGE_LIMIT = 10
        self.PROBE_MAX_DIMENSION = 1200
        self.RENDER_DPI = 150
        self.JPEG_QUALITY = 75

        # Fallback Image Configuration
        self.FALLBACK_WIDTH = 800
        self.FALLBACK_HEIGHT = 600
        self.FALLBACK_BORDER = 50
        self.FALLBACK_BACKGROUND = (255, 255, 255, 255)
        self.FALLBACK_BORDER_COLOR = (200, 200, 200, 255)

        # Debug Output Configuration
        self.DEBUG_DIR = os.environ.get("LECTURE_DEBUG_DIR") or None
        self.DEBUG_IMAGE_PATTERN = "page_{:02d}.jpg"

        # User-facing Messages
        self.FALLBACK_SUMMARY = "Unable to generate summary."
        self.MESSAGE_NO_FILE = "No file uploaded."
        self.MESSAGE_NOT_PDF = "Only PDF files are supported."
        self.MESSAGE_NO_TEXT = "Unable to extract text from PDF."
        self.MESSAGE_NO_IMAGES = "Unable to convert PDF to images."
        self.MESSAGE_INTERNAL_ERROR = (
            "An error occurred while processing your request."
        )

        # Prompts
        self.SUMMARY_PROMPT_FOCUS = """Focus on:
1. Main topics and key concepts
2. Important points and takeaways
3. Any conclusions or recommendations"""

        self.SUMMARY_PROMPT_TEXT = (
            "Please provide a comprehensive summary of this lecture. "
            + self.SUMMARY_PROMPT_FOCUS
        )
        self.SUMMARY_PROMPT_IMAGES = (
            "Please analyze these lecture slides and provide a comprehensive "
            "summary. " + self.SUMMARY_PROMPT_FOCUS
        )
        self.LECTURE_CONTENT_HEADER = "Lecture content:"
        self.OUTPUT_FORMAT_INSTRUCTIONS = (
            "Please provide a well-structured summary in bullet points or "
            "short paragraphs:"
        )

    def save(self) -> None:
        """Save configuration to JSON file."""
        self._CONFIG_FILE_PATH.parent.mkdir(parents=True, exist_ok=True)

        data = {}
        for key, value in vars(self).items():
            if key.startswith("_"):
                continue
            data[key] = value

        with open(self._CONFIG_FILE_PATH, "w") as f:
            json.dump(data, f, indent=2)

    def load(self) -> None:
        """Load configuration from JSON file."""
        if not self._CONFIG_FILE_PATH.exists():
            return

        with open(self._CONFIG_FILE_PATH, "r") as f:
            data = json.load(f)

        for key, value in data.items():
            if hasattr(self, key) and not key.startswith("_"):
                # JSON has no tuples
                if isinstance(value, list):
                    value = tuple(value)
                setattr(self, key, value)

    @property
    def MODEL_ID(self) -> str:
        """Get the Bedrock model identifier."""
        return self._model_id

    @MODEL_ID.setter
    def MODEL_ID(self, value: str) -> None:
        """Set the Bedrock model identifier."""
        if not value:
            raise ValueError("MODEL_ID cannot be empty")
        self._model_id = value

    @property
    def AWS_REGION(self) -> str:
        """Get the AWS region used for Bedrock."""
        return self._aws_region

    @AWS_REGION.setter
    def AWS_REGION(self, value: str) -> None:
        """Set the AWS region and update the client."""
        self._aws_region = value
        self._update_client()

    @property
    def client(self) -> Any:
        """Get the shared bedrock-runtime client, created on first use."""
        if self._client is None:
            self._client = boto3.client(
                "bedrock-runtime", region_name=self._aws_region
            )
        return self._client
