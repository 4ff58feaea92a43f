from vsl_analyzer.records import InMemoryRecordStore, TranscriptDirectoryStore, VideoRecord
from vsl_analyzer.storage import OutputDirectory, Workspace


def test_ensure_creates_once_and_is_idempotent(tmp_path):
    directory = OutputDirectory(tmp_path / "a" / "b")

    assert directory.ensure() == tmp_path / "a" / "b"
    assert directory.ensure().is_dir()


def test_write_text_replaces_content(tmp_path):
    directory = OutputDirectory(tmp_path / "out")

    directory.write_text("x.txt", "first")
    path = directory.write_text("x.txt", "second")

    assert path.read_text(encoding="utf-8") == "second"


def test_workspace_under_lays_out_directories(tmp_path):
    workspace = Workspace.under(tmp_path)

    assert workspace.audio.root == tmp_path / "video"
    assert workspace.transcripts.root == tmp_path / "transcription"
    assert workspace.analyses.root == tmp_path / "vsl-analysis"
    assert not workspace.audio.root.exists()


def test_transcript_directory_store_finds_prior_transcript(tmp_path):
    directory = OutputDirectory(tmp_path / "transcription")
    path = directory.write_text("My_VSL_[xyz789]_transcript.txt", "Hello world")
    directory.write_text("Other_[abc123]_transcript.txt", "Something else")

    record = TranscriptDirectoryStore(directory).lookup("xyz789")

    assert record == VideoRecord(video_id="xyz789", transcript="Hello world", transcript_path=str(path))


def test_transcript_directory_store_missing(tmp_path):
    store = TranscriptDirectoryStore(OutputDirectory(tmp_path / "never-created"))

    assert store.lookup("xyz789") is None
    assert not (tmp_path / "never-created").exists()


def test_in_memory_store():
    store = InMemoryRecordStore()
    store.add(VideoRecord("xyz789", "Hello world"))

    assert store.lookup("xyz789").transcript == "Hello world"
    assert store.lookup("abc123") is None


def test_transcript_directory_store_ignores_ids_ending_in_the_same_text(tmp_path):
    directory = OutputDirectory(tmp_path / "transcription")
    directory.write_text("Some_Title_[abc_123]_transcript.txt", "other video's transcript")
    directory.write_text("Some_Title_abc_123_transcript.txt", "untagged transcript")

    store = TranscriptDirectoryStore(directory)

    assert store.lookup("123") is None
    assert store.lookup("abc_123").transcript == "other video's transcript"


def test_transcript_directory_store_matches_ids_literally(tmp_path):
    directory = OutputDirectory(tmp_path / "transcription")
    directory.write_text("Title_[abc123]_transcript.txt", "Hello world")
    directory.write_text("Title_[x]_[abc123]_transcript.txt", "nested tag")

    store = TranscriptDirectoryStore(directory)

    assert store.lookup("abc12?") is None
    assert store.lookup("*") is None
    assert store.lookup("abc123").transcript == "Hello world"
