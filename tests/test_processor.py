"""Unit tests for ConversationProcessor."""

import copy

import pytest
from conftest import artifact_tag, conversation_payload

from artifact_export.engine import ConversationProcessor
from artifact_export.errors import ConversationProcessError
from artifact_export.models import ArchivePathRegistry, ConversationFull
from artifact_export.packaging import ZipArchive


@pytest.fixture
def processor() -> ConversationProcessor:
    return ConversationProcessor()


class TestConversationProcessor:
    """Tests for ConversationProcessor.process()."""

    def test_no_message_list(self, processor):
        """A conversation without chat_messages writes nothing."""
        archive, registry = ZipArchive(), ArchivePathRegistry()
        conversation = ConversationFull.from_api({"uuid": "c1", "name": "Empty"})

        assert processor.process(conversation, archive, registry) == 0
        assert len(archive) == 0
        assert len(registry) == 0

    def test_writes_artifacts_under_namespace(self, processor):
        archive, registry = ZipArchive(), ArchivePathRegistry()
        payload = conversation_payload(
            "c1",
            "My Project: v2",
            artifact_tag("print(1)", title="main", language="python")
            + artifact_tag("body {}", title="styles/site", language="CSS"),
        )

        count = processor.process(ConversationFull.from_api(payload), archive, registry)

        assert count == 2
        assert archive.paths == ["My_Project_v2/main.py", "My_Project_v2/styles/site.css"]

    def test_untitled_conversation_namespace(self, processor):
        archive, registry = ZipArchive(), ArchivePathRegistry()
        payload = conversation_payload("c1", None, artifact_tag("x", title="a"))

        processor.process(ConversationFull.from_api(payload), archive, registry)

        assert archive.paths == ["Untitled/a.txt"]

    def test_user_messages_not_scanned(self, processor):
        archive, registry = ZipArchive(), ArchivePathRegistry()
        payload = {
            "uuid": "c1",
            "name": "Chat",
            "chat_messages": [
                {"sender": "human", "text": artifact_tag("pasted", title="user")},
                {"sender": "assistant", "text": "no artifacts here"},
            ],
        }

        assert processor.process(ConversationFull.from_api(payload), archive, registry) == 0
        assert len(archive) == 0

    def test_legacy_message_shapes(self, processor):
        archive, registry = ZipArchive(), ArchivePathRegistry()
        payload = {
            "uuid": "c1",
            "name": "Old",
            "chat_messages": [
                {"sender": "assistant", "content": artifact_tag("a", title="one")},
                {"sender": "assistant", "text": artifact_tag("b", title="two")},
            ],
        }

        assert processor.process(ConversationFull.from_api(payload), archive, registry) == 2
        assert archive.paths == ["Old/one.txt", "Old/two.txt"]

    def test_duplicate_titles_across_messages(self, processor):
        archive, registry = ZipArchive(), ArchivePathRegistry()
        payload = conversation_payload(
            "c1",
            "Iterations",
            artifact_tag("v1", title="app", language="python"),
            artifact_tag("v2", title="app", language="python"),
        )

        processor.process(ConversationFull.from_api(payload), archive, registry)

        assert archive.paths == ["Iterations/app.py", "Iterations/app_1.py"]

    def test_registry_shared_across_conversations(self, processor):
        """Two conversations with the same name do not overwrite each other."""
        archive, registry = ZipArchive(), ArchivePathRegistry()
        for uuid in ("c1", "c2"):
            payload = conversation_payload(uuid, "Same", artifact_tag("x", title="f"))
            processor.process(ConversationFull.from_api(payload), archive, registry)

        assert archive.paths == ["Same/f.txt", "Same/f_1.txt"]

    def test_conversation_not_mutated(self, processor):
        payload = conversation_payload("c1", "Chat", artifact_tag("x", title="f"))
        conversation = ConversationFull.from_api(payload)
        snapshot = copy.deepcopy(conversation)

        processor.process(conversation, ZipArchive(), ArchivePathRegistry())

        assert conversation == snapshot

    def test_archive_failure_wrapped(self, processor):
        class BrokenArchive:
            def put(self, path, data):
                raise OSError("disk full")

        payload = conversation_payload("c1", "Chat", artifact_tag("x", title="f"))

        with pytest.raises(ConversationProcessError) as exc_info:
            processor.process(ConversationFull.from_api(payload), BrokenArchive(), ArchivePathRegistry())

        assert exc_info.value.conversation_id == "c1"
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_failed_write_rolls_back_conversation(self, processor):
        class RejectingArchive(ZipArchive):
            def put(self, path, data):
                if path.endswith("second.txt"):
                    raise OSError("entry rejected")
                super().put(path, data)

        archive, registry = RejectingArchive(), ArchivePathRegistry()
        archive.put("Earlier/kept.txt", b"kept")
        payload = conversation_payload(
            "c1", "Chat", artifact_tag("1", title="first") + artifact_tag("2", title="second")
        )

        with pytest.raises(ConversationProcessError):
            processor.process(ConversationFull.from_api(payload), archive, registry)

        assert archive.paths == ["Earlier/kept.txt"]
        # Paths stay reserved so later conversations never reuse them
        assert "Chat/first.txt" in registry

    def test_numeric_conversation_name(self, processor):
        archive, registry = ZipArchive(), ArchivePathRegistry()
        payload = conversation_payload("c1", None, artifact_tag("x", title="f"))
        payload["name"] = 123

        assert processor.process(ConversationFull.from_api(payload), archive, registry) == 1
        assert archive.paths == ["123/f.txt"]
