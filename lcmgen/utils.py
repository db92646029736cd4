"""Utility functions for loading schema documents.

This module provides functions for loading schema documents from files and
URLs with proper error handling and validation.
"""

import json
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import urlparse

import requests

from .codegen.core.schema import ModelError, Schema, convert_schema_document
from .logging_config import get_logger

logger = get_logger(__name__)


class SchemaLoaderError(Exception):
    """Custom exception for schema document loading errors."""

    pass


def load_document_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load a schema document from a local file.

    Args:
        file_path: Path to the JSON schema document.

    Returns:
        Tuple of (source path, parsed document).

    Raises:
        FileNotFoundError: If file doesn't exist.
        SchemaLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load schema document from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning(f"File does not have .json extension: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info(f"Loaded schema document from {file_path}")
        return str(file_path), data
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}")
        raise SchemaLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise SchemaLoaderError(f"Error reading file {file_path}: {e}") from e


def load_document_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load a schema document from a URL.

    Args:
        url: URL to fetch the document from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (URL, parsed document).

    Raises:
        SchemaLoaderError: If URL is invalid, request fails, or response isn't valid JSON.
    """
    logger.debug(f"Attempting to load schema document from URL: {url}")

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error(f"Invalid URL format: {url}")
        raise SchemaLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "").lower()
        if "application/json" not in content_type and not url.endswith(".json"):
            logger.warning(f"URL {url} does not have JSON content type: {content_type}")

        data = response.json()
        logger.info(f"Loaded schema document from {url}")
        return url, data

    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise SchemaLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise SchemaLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise SchemaLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}")
        raise SchemaLoaderError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        logger.error(f"Invalid JSON response from URL {url}: {e}")
        raise SchemaLoaderError(f"Invalid JSON response from URL {url}: {e}") from e


def load_schema(
    paths: Iterable[str | Path] = (),
    urls: Iterable[str] = (),
    timeout: int = 30,
) -> Schema:
    """Load and merge schema documents into one validated schema.

    Documents are merged in order: files first, then URLs.

    Raises:
        SchemaLoaderError: If no document is given or one cannot be loaded.
        FileNotFoundError: If a file doesn't exist.
        ModelError: If the merged schema is inconsistent.
    """
    documents = [load_document_from_file(path) for path in paths]
    documents.extend(load_document_from_url(url, timeout) for url in urls)

    if not documents:
        raise SchemaLoaderError("No schema documents given")

    try:
        return convert_schema_document(documents)
    except ModelError as e:
        logger.error(f"Schema validation failed: {e}")
        raise
