"""Factory functions for the HTTP session and document store clients."""

from typing import Any

import requests

import config
from utils.logger import get_logger
from utils.error_handler import ConfigError, RemoteSaveError

logger = get_logger()

# Cache for built clients to avoid rebuilding them unnecessarily
_session_cache: dict[str, requests.Session] = {}
_firestore_cache: dict[str, Any] = {}

def build_session(api_key: str | None) -> requests.Session:
    """Builds and returns an HTTP session for the completion endpoint.

    The session carries the bearer credential and JSON content type on every
    request. Sessions are cached per API key.

    Args:
        api_key: The completion endpoint API key.

    Returns:
        requests.Session: A session with default headers set.

    Raises:
        ConfigError: If no API key is provided.
    """
    if not api_key:
        logger.critical("Completion API key is missing. Check MISTRAL_API_KEY.")
        raise ConfigError("MISTRAL_API_KEY not found or provided.")

    if api_key in _session_cache:
        logger.debug("Using cached completion session")
        return _session_cache[api_key]

    session = requests.Session()
    session.headers.update({
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    })
    _session_cache[api_key] = session
    logger.info(f"Built completion session for {config.MISTRAL_BASE_URL}.")
    return session

def build_firestore_client(project: str) -> Any:
    """Builds and returns a Firestore client for the given project, cached per project.

    Raises:
        RemoteSaveError: If the client cannot be created (missing credentials etc.).
    """
    if project in _firestore_cache:
        logger.debug(f"Using cached Firestore client for {project}")
        return _firestore_cache[project]

    # Imported lazily so the local-only flow never touches Google credentials
    from google.cloud import firestore
    from google.auth.exceptions import DefaultCredentialsError

    logger.debug(f"Building Firestore client for project {project}...")
    try:
        client = firestore.Client(project=project)
    except DefaultCredentialsError as e:
        logger.error(f"No Google credentials available for Firestore project '{project}': {e}", exc_info=config.DEBUG)
        raise RemoteSaveError(f"Google credentials not configured for project '{project}'.") from e
    _firestore_cache[project] = client
    logger.info(f"Successfully built Firestore client for {project}.")
    return client
