"""
Unit tests for ChunkingSession and the chunk-size controller.

Dependencies: pytest, code_chunker.chunking.session
System role: Re-chunking state machine, rollback and navigation validation
"""

import pytest

from code_chunker.chunking.pipeline import ChunkingPipeline
from code_chunker.chunking.session import ChunkingSession, ControllerState
from code_chunker.exceptions import RechunkFailure
from code_chunker.models import ChunkingStrategy


class ExplodingPipeline(ChunkingPipeline):
    """Pipeline whose passes always fail"""

    def __init__(self):
        super().__init__()
        self.calls = 0

    def run(self, content, target_size, strategy=ChunkingStrategy.SEMANTIC, analysis=None):
        self.calls += 1
        raise RuntimeError("boom")


class RecordingPipeline(ChunkingPipeline):
    """Pipeline that counts passes"""

    def __init__(self):
        super().__init__()
        self.sizes = []

    def run(self, content, target_size, strategy=ChunkingStrategy.SEMANTIC, analysis=None):
        self.sizes.append(target_size)
        return super().run(content, target_size, strategy, analysis)


@pytest.fixture
def session(two_large_files):
    return ChunkingSession(two_large_files, chunk_size=70000, min_chunk_size=1)


class TestChunkingSession:
    """Test suite for session processing and resizing."""

    def test_empty_content(self):
        session = ChunkingSession("")

        assert session.chunks == []
        assert session.current_chunk is None
        assert session.copy_all_content() == ""
        assert session.process_content("") == []

    def test_initial_pass(self, session, two_large_files):
        assert len(session.chunks) == 2
        assert session.current_chunk_size == 70000
        assert session.strategy == ChunkingStrategy.SEMANTIC
        assert session.last_error is None
        assert "".join(c.content for c in session.chunks) == two_large_files

    def test_resize_collapses_and_clamps_index(self, session, two_large_files):
        session.switch_to_chunk(1)

        assert session.update_chunk_size(200000)
        assert len(session.chunks) == 1
        assert session.chunks[0].content == two_large_files
        assert session.current_chunk_size == len(two_large_files)
        assert session.current_chunk_index == 0

    def test_resize_to_same_size_is_ignored(self, two_large_files):
        pipeline = RecordingPipeline()
        session = ChunkingSession(two_large_files, chunk_size=70000, min_chunk_size=1, pipeline=pipeline)

        assert not session.update_chunk_size(70000)
        assert pipeline.sizes == [70000]

    def test_same_size_gives_same_chunks(self, session):
        before = [(c.start_pos, c.end_pos, c.wrapped_content) for c in session.chunks]
        session.update_chunk_size(200000)
        session.update_chunk_size(70000)

        assert [(c.start_pos, c.end_pos, c.wrapped_content) for c in session.chunks] == before

    def test_minimum_size_is_enforced(self, two_large_files):
        session = ChunkingSession(two_large_files, chunk_size=70000, min_chunk_size=100000)

        assert session.current_chunk_size == 100000
        assert session.clamp_chunk_size(10) == 100000
        assert len(session.chunks) == 2

    def test_set_strategy(self, session, two_large_files):
        assert session.set_strategy("size-based")
        assert all(c.strategy == ChunkingStrategy.SIZE_BASED for c in session.chunks)
        assert "".join(c.content for c in session.chunks) == two_large_files
        assert not session.set_strategy(ChunkingStrategy.SIZE_BASED)

        with pytest.raises(ValueError):
            session.set_strategy("clustered")

    def test_process_content_starts_over(self, session, collection_builder):
        session.switch_to_chunk(1)
        session.process_content(collection_builder(("a.py", "a = 1\n")))

        assert len(session.chunks) == 1
        assert session.current_chunk_index == 0


class TestChunkSizeController:
    """Test suite for the Idle/Rechunking state machine."""

    def test_requests_while_rechunking_are_ignored(self, session):
        chunks = session.chunks
        session.controller.state = ControllerState.RECHUNKING

        assert not session.update_chunk_size(200000)
        assert session.chunks is chunks

        session.controller.state = ControllerState.IDLE
        assert session.update_chunk_size(200000)

    def test_failure_keeps_previous_chunks(self, session):
        chunks = session.chunks
        session.pipeline = ExplodingPipeline()

        assert not session.update_chunk_size(90000)
        assert session.chunks is chunks
        assert session.current_chunk_size == 70000
        assert isinstance(session.last_error, RechunkFailure)
        assert isinstance(session.last_error.cause, RuntimeError)
        assert session.last_error.target_size == 90000

    def test_failure_releases_the_guard(self, session):
        session.pipeline = ExplodingPipeline()
        session.update_chunk_size(90000)

        assert session.controller.state == ControllerState.IDLE
        session.update_chunk_size(80000)
        assert session.pipeline.calls == 2

    def test_failure_without_previous_chunks_degrades_to_whole_content(self, two_large_files):
        session = ChunkingSession(two_large_files, chunk_size=70000, min_chunk_size=1,
                                  pipeline=ExplodingPipeline())

        assert len(session.chunks) == 1
        assert session.chunks[0].content == two_large_files
        assert "DONE WITH ALL CHUNKS" in session.chunks[0].wrapped_content
        assert session.last_error is not None

    def test_success_clears_last_error(self, session):
        pipeline = session.pipeline
        session.pipeline = ExplodingPipeline()
        session.update_chunk_size(90000)
        session.pipeline = pipeline

        assert session.update_chunk_size(200000)
        assert session.last_error is None


class TestNavigation:
    """Test suite for moving between chunks."""

    def test_next_and_previous(self, session):
        assert not session.previous_chunk()
        assert session.next_chunk()
        assert session.current_chunk is session.chunks[1]
        assert not session.next_chunk()
        assert session.previous_chunk()
        assert session.current_chunk_index == 0

    def test_switch_to_chunk(self, session):
        assert session.switch_to_chunk(1) is session.chunks[1]

        with pytest.raises(IndexError):
            session.switch_to_chunk(2)
        with pytest.raises(IndexError):
            session.switch_to_chunk(-1)

    def test_navigate_to_referenced_chunk(self, session):
        assert session.navigate_to_referenced_chunk(1)
        assert session.current_chunk_index == 1
        assert not session.navigate_to_referenced_chunk(5)
        assert session.current_chunk_index == 1

    def test_copy_all_content(self, session):
        copied = session.copy_all_content()

        assert copied == "\n".join(c.wrapped_content for c in session.chunks)
        assert copied.count("SEMANTIC CHUNK ") == 2


class TestSessionReport:
    """Test suite for the session-level analysis helpers."""

    def test_analysis_summary(self, session):
        analysis = session.analysis_summary()

        assert analysis.total_chunks == 2
        assert analysis.chunking_strategy == "semantic"
        assert analysis.files == {"foo.js": [0], "baz.js": [1]}
        assert analysis.semantic_cohesion == 1.0

    def test_export_reports_strategy_used(self):
        session = ChunkingSession("plain text\n" * 20, chunk_size=50, min_chunk_size=1)
        report = session.export_semantic_analysis()

        assert "Strategy: size-based" in report
