"""Core logic tying prompts, completions, storage and exports together for one view."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Mapping, Optional

import config
from core.exporter import ExportArtifact, export_response, export_rubric_html, save_artifact
from core.prompts import PromptRequest, TaskKind, build_prompt
from core.rubric_parser import RubricRow, parse_rubric
from services.completion_client import CompletionClient
from services.history_store import HistoryEntry, HistoryStore
from services.remote_store import RemoteStore, UserProfile, default_user
from services.usage_tracker import UsageTracker
from utils.logger import get_logger
from utils.error_handler import PersistenceError

logger = get_logger()


@dataclass(frozen=True)
class CompletionResult:
    text: str
    task_kind: TaskKind

    @property
    def feature(self) -> str:
        return self.task_kind.label


class Assistant:
    """Orchestrates generation, history, usage and export for a single view.

    At most one generation runs at a time; a second call while one is in
    flight is rejected rather than queued.
    """

    def __init__(
        self,
        client: CompletionClient,
        history: HistoryStore,
        usage: UsageTracker,
        remote: Optional[RemoteStore] = None,
        user: Optional[UserProfile] = None,
    ):
        self.client = client
        self.history = history
        self.usage = usage
        self.remote = remote
        self.user = user or default_user()
        self.busy = False
        logger.info("Assistant initialized (remote store=%s)", bool(remote and remote.enabled))

    def generate(self, task_kind: TaskKind, text: str, fields: Optional[Mapping[str, str]] = None) -> CompletionResult:
        """Runs one task end to end.

        Raises:
            ValueError: If the input text is blank.
            RuntimeError: If another generation is still running.
            CompletionError: If the endpoint call ultimately fails.
        """
        if not text or not text.strip():
            raise ValueError("Please enter some text or upload a file.")
        if self.busy:
            raise RuntimeError("A generation is already in progress.")

        self.busy = True
        try:
            request = PromptRequest(task_kind, text, fields or {})
            prompt = build_prompt(request)
            logger.info(f"Generating '{task_kind.label}' ({len(text)} chars input).")
            content = self.client.complete(prompt)
        finally:
            self.busy = False

        try:
            self.usage.increment()
        except PersistenceError as e:
            # The result is still good; only the counter is out of date.
            logger.warning(f"Could not record usage: {e}")
        return CompletionResult(content, task_kind)

    def rubric_rows(self, result: CompletionResult) -> List[RubricRow]:
        return parse_rubric(result.text)

    def save_to_history(self, result: CompletionResult, input_text: str,
                        timestamp: Optional[datetime] = None) -> HistoryEntry:
        return self.history.save(
            content=result.text,
            feature=result.feature,
            input=input_text,
            timestamp=timestamp,
        )

    def export(self, content: str, feature: str, fmt: str, directory: str = config.EXPORT_DIR) -> str:
        artifact = export_response(content, feature, fmt)
        return save_artifact(artifact, directory)

    def export_rubric(self, result: CompletionResult, directory: str = config.EXPORT_DIR) -> str:
        artifact: ExportArtifact = export_rubric_html(self.rubric_rows(result))
        return save_artifact(artifact, directory)

    def save_remote(self, result: CompletionResult, input_text: str) -> Optional[str]:
        """Best-effort remote copy. Returns the document id, or None when remote saving is off.

        Raises:
            RemoteSaveError: If the remote write fails; callers treat it as a warning.
        """
        if not self.remote or not self.remote.enabled:
            logger.debug("Remote store not configured; skipping remote save.")
            return None
        return self.remote.save_response(self.user, result.feature, input_text, result.text)
