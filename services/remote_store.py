"""Best-effort copy of generated responses to a Firestore collection."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from google.api_core import exceptions as google_api_exceptions

import config
from api_clients import build_firestore_client
from utils.logger import get_logger
from utils.error_handler import RemoteSaveError

logger = get_logger()


@dataclass(frozen=True)
class UserProfile:
    user_id: str
    email: str = ""
    name: str = ""


def default_user() -> UserProfile:
    return UserProfile(config.USER_ID, config.USER_EMAIL, config.USER_NAME)


class RemoteStore:
    """Appends response documents to a collection. Failures never block the caller's main flow."""

    def __init__(self, client: Any = None, project: Optional[str] = config.FIRESTORE_PROJECT,
                 collection: str = config.FIRESTORE_COLLECTION):
        self._client = client
        self.project = project
        self.collection = collection

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self.project)

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.project:
                raise RemoteSaveError("Remote saving is disabled: no Firestore project configured.")
            self._client = build_firestore_client(self.project)
        return self._client

    def build_document(self, user: UserProfile, feature: str, input: str, response: str,
                       timestamp: Optional[datetime] = None) -> Dict[str, Any]:
        return {
            "userId": user.user_id,
            "feature": feature,
            "input": input,
            "response": response,
            "timestamp": timestamp or datetime.now(timezone.utc),
            "userEmail": user.email,
            "userName": user.name,
        }

    def save_response(self, user: UserProfile, feature: str, input: str, response: str,
                      timestamp: Optional[datetime] = None) -> str:
        """Adds one document and returns its id.

        Raises:
            RemoteSaveError: If the store is disabled or the write fails.
        """
        document = self.build_document(user, feature, input, response, timestamp)
        try:
            _, ref = self._get_client().collection(self.collection).add(document)
        except google_api_exceptions.GoogleAPIError as e:
            logger.error(f"Firestore error saving response for '{feature}': {e}", exc_info=config.DEBUG)
            raise RemoteSaveError(f"Failed to save response remotely: {e}") from e
        logger.info(f"Saved response for '{feature}' to Firestore collection '{self.collection}' ({ref.id}).")
        return ref.id
