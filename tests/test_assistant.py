"""
Test: assistant orchestration with fake completion client and document store.
"""
from datetime import datetime

import pytest
from google.api_core import exceptions as google_api_exceptions

from core.assistant import Assistant, CompletionResult
from core.prompts import TaskKind
from services.history_store import HistoryStore
from services.remote_store import RemoteStore, UserProfile
from services.usage_tracker import UsageTracker
from utils.error_handler import CompletionError, RemoteSaveError


class FakeClient:
    def __init__(self, reply="Generated text", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


class FakeDocumentRef:
    def __init__(self, doc_id):
        self.id = doc_id


class FakeCollection:
    def __init__(self, db, name):
        self.db = db
        self.name = name

    def add(self, document):
        if self.db.error:
            raise self.db.error
        self.db.added.append((self.name, document))
        return None, FakeDocumentRef(f"doc{len(self.db.added)}")


class FakeFirestore:
    def __init__(self, error=None):
        self.error = error
        self.added = []

    def collection(self, name):
        return FakeCollection(self, name)


def make_assistant(storage, client=None, remote=None):
    return Assistant(
        client=client or FakeClient(),
        history=HistoryStore(storage),
        usage=UsageTracker(storage),
        remote=remote,
        user=UserProfile("u1", "teacher@example.org", "Ms. Rivera"),
    )


class TestGenerate:
    def test_success_counts_usage(self, storage):
        client = FakeClient("Score: 90")
        assistant = make_assistant(storage, client)

        result = assistant.generate(TaskKind.GRADING, "My essay", {"criteria": "clarity"})

        assert result == CompletionResult("Score: 90", TaskKind.GRADING)
        assert result.feature == "Automatic Grading"
        assert "Grading Criteria: clarity" in client.prompts[0]
        assert assistant.usage.load().total_calls == 1
        assert assistant.busy is False

    def test_failure_does_not_count_usage(self, storage):
        assistant = make_assistant(storage, FakeClient(error=CompletionError("down", attempts=3)))

        with pytest.raises(CompletionError):
            assistant.generate(TaskKind.SUMMARIZATION, "Article")

        assert assistant.usage.load().total_calls == 0
        assert assistant.busy is False

    @pytest.mark.parametrize("text", ["", "   \n\t"])
    def test_blank_input_rejected(self, storage, text):
        client = FakeClient()
        assistant = make_assistant(storage, client)
        with pytest.raises(ValueError):
            assistant.generate(TaskKind.GRADING, text)
        assert client.prompts == []

    def test_busy_rejects_second_request(self, storage):
        client = FakeClient()
        assistant = make_assistant(storage, client)
        assistant.busy = True
        with pytest.raises(RuntimeError):
            assistant.generate(TaskKind.GRADING, "essay")
        assert client.prompts == []


class TestResults:
    def test_save_to_history_truncates_input(self, storage):
        assistant = make_assistant(storage)
        result = CompletionResult("Lesson", TaskKind.LESSON_PLAN)

        entry = assistant.save_to_history(result, "t" * 150, timestamp=datetime(2026, 1, 1))

        assert entry.input == "t" * 100 + "..."
        assert entry.feature == "Lesson Plan Generator"
        assert assistant.history.list() == [entry]

    def test_rubric_rows_from_result(self, storage):
        assistant = make_assistant(storage)
        rows = assistant.rubric_rows(CompletionResult("1. Clarity:\nGood: fine", TaskKind.RUBRIC))
        assert [row.criteria for row in rows] == ["Clarity"]

    def test_export_writes_file(self, storage, tmp_path):
        assistant = make_assistant(storage)
        path = assistant.export("content", "Report Card Comments", "txt", directory=str(tmp_path))
        assert path.startswith(str(tmp_path))
        assert "report_card_comments_" in path

    def test_export_rubric(self, storage, tmp_path):
        assistant = make_assistant(storage)
        path = assistant.export_rubric(CompletionResult("no rubric here", TaskKind.RUBRIC), directory=str(tmp_path))
        with open(path, encoding="utf-8") as f:
            assert "Content Quality &amp; Understanding" in f.read()


class TestRemoteSave:
    def test_disabled_remote_is_skipped(self, storage):
        assistant = make_assistant(storage, remote=RemoteStore(project=None))
        assert assistant.save_remote(CompletionResult("x", TaskKind.GRADING), "in") is None

    def test_saves_document(self, storage):
        db = FakeFirestore()
        assistant = make_assistant(storage, remote=RemoteStore(client=db, collection="responses"))

        doc_id = assistant.save_remote(CompletionResult("feedback", TaskKind.GRADING), "essay")

        assert doc_id == "doc1"
        name, document = db.added[0]
        assert name == "responses"
        assert {k: document[k] for k in ("userId", "feature", "input", "response", "userEmail", "userName")} == {
            "userId": "u1",
            "feature": "Automatic Grading",
            "input": "essay",
            "response": "feedback",
            "userEmail": "teacher@example.org",
            "userName": "Ms. Rivera",
        }
        assert isinstance(document["timestamp"], datetime)

    def test_remote_failure_becomes_remote_save_error(self, storage):
        db = FakeFirestore(error=google_api_exceptions.ServiceUnavailable("down"))
        assistant = make_assistant(storage, remote=RemoteStore(client=db))

        with pytest.raises(RemoteSaveError):
            assistant.save_remote(CompletionResult("x", TaskKind.GRADING), "in")
        assert assistant.history.list() == []
