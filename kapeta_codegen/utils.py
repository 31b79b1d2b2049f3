"""Utility functions for loading data and context documents.

Block definitions and generation data are JSON or YAML documents, read
from local files or fetched over HTTP.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests
import yaml

from .core.errors import DocumentLoadError
from .logging_config import get_logger

logger = get_logger(__name__)

YAML_SUFFIXES = (".yml", ".yaml")


def _is_yaml(name: str) -> bool:
    return name.lower().endswith(YAML_SUFFIXES)


def parse_document(text: str, name: str) -> Any:
    """Parse document text as YAML or JSON, decided by the name's extension.

    Args:
        text: Raw document text.
        name: File name or URL of the document.

    Returns:
        Parsed document.

    Raises:
        DocumentLoadError: If the text is not valid YAML/JSON.
    """
    try:
        if _is_yaml(name):
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        logger.error(f"Invalid document {name}: {e}")
        raise DocumentLoadError(f"Invalid document {name}: {e}") from e


def load_document_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load a JSON or YAML document from a local file.

    Args:
        file_path: Path to the document.

    Returns:
        Tuple of (source description, parsed data).

    Raises:
        DocumentLoadError: If the file is missing, unreadable or invalid.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load document from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise DocumentLoadError(f"File not found: {file_path}")

    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise DocumentLoadError(f"Error reading file {file_path}: {e}") from e

    data = parse_document(text, file_path.name)
    logger.info(f"Successfully loaded document from {file_path}")
    return str(file_path), data


def load_document_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load a JSON or YAML document from a URL.

    Args:
        url: URL to fetch the document from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed data).

    Raises:
        DocumentLoadError: If URL is invalid, request fails, or response isn't valid.
    """
    logger.debug(f"Attempting to load document from URL: {url}")

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error(f"Invalid URL format: {url}")
        raise DocumentLoadError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise DocumentLoadError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise DocumentLoadError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise DocumentLoadError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}", exc_info=True)
        raise DocumentLoadError(f"Request error for URL {url}: {e}") from e

    content_type = response.headers.get("content-type", "").lower()
    name = parsed_url.path
    if "yaml" in content_type and not _is_yaml(name):
        name = f"{name}.yaml"

    data = parse_document(response.text, name)
    logger.info(f"Successfully loaded document from {url}")
    return url, data


def load_document(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, Any]:
    """Load a document from either a file or URL.

    Args:
        file_path: Path to local document (mutually exclusive with url).
        url: URL to fetch the document from (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, parsed data).

    Raises:
        DocumentLoadError: If neither or both parameters are provided, or loading fails.
    """
    if not file_path and not url:
        logger.error("Neither file_path nor url provided")
        raise DocumentLoadError("Either file_path or url must be provided")

    if file_path and url:
        logger.error("Both file_path and url provided")
        raise DocumentLoadError("Cannot specify both file_path and url")

    if file_path:
        return load_document_from_file(file_path)
    else:
        return load_document_from_url(url, timeout)


def load_document_source(source: str, timeout: int = 30) -> tuple[str, Any]:
    """Load a document from a location that may be either a URL or a path."""
    if urlparse(source).scheme in ("http", "https"):
        return load_document(url=source, timeout=timeout)
    return load_document(file_path=source)
