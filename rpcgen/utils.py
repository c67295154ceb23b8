"""Utility functions for loading service descriptors.

This module provides functions for loading JSON service descriptors from
files, URLs and streams with proper error handling and validation.
"""

import json
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class DescriptorLoaderError(Exception):
    """Raised when a descriptor cannot be read or parsed."""

    pass


def load_descriptor_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load a JSON descriptor from a local file.

    Args:
        file_path: Path to the descriptor file.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If file doesn't exist.
        DescriptorLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load descriptor from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning("File does not have .json extension: %s", file_path)

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info("Loaded descriptor from %s", file_path)
        return str(file_path), data
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise DescriptorLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise DescriptorLoaderError(f"Error reading file {file_path}: {e}") from e


def load_descriptor_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load a JSON descriptor from a URL.

    Args:
        url: URL to fetch the descriptor from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        DescriptorLoaderError: If URL is invalid, request fails, or response isn't valid JSON.
    """
    logger.debug("Attempting to load descriptor from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise DescriptorLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "").lower()
        if "application/json" not in content_type and not url.endswith(".json"):
            logger.warning("URL %s does not have JSON content type: %s", url, content_type)

        data = response.json()
        logger.info("Loaded descriptor from %s", url)
        return url, data

    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise DescriptorLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise DescriptorLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, url)
        raise DescriptorLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e)
        raise DescriptorLoaderError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        # requests raises a ValueError subclass for undecodable bodies
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise DescriptorLoaderError(f"Invalid JSON response from URL {url}: {e}") from e


def load_descriptor_from_stream(stream: TextIO, name: str = "<stdin>") -> tuple[str, Any]:
    """Load a JSON descriptor from an open text stream."""
    try:
        return name, json.load(stream)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in %s: %s", name, e)
        raise DescriptorLoaderError(f"Invalid JSON in {name}: {e}") from e


def load_descriptor(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, Any]:
    """Load a descriptor from either a file or URL.

    Args:
        file_path: Path to local JSON file (mutually exclusive with url).
        url: URL to fetch JSON from (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        DescriptorLoaderError: If neither or both parameters are provided, or loading fails.
        FileNotFoundError: If file doesn't exist.
    """
    if not file_path and not url:
        raise DescriptorLoaderError("Either file_path or url must be provided")

    if file_path and url:
        raise DescriptorLoaderError("Cannot specify both file_path and url")

    if file_path:
        return load_descriptor_from_file(file_path)
    return load_descriptor_from_url(url, timeout)
