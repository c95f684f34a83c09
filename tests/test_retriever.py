import os
import threading
from concurrent.futures import ThreadPoolExecutor

from conftest import FakeClient, make_item

from library.retriever import ArtifactRetriever


class RecordingSleep:
    def __init__(self, client):
        self.client = client
        self.calls = []

    def __call__(self, seconds):
        # remember how many downloads had started when we paused
        self.calls.append((seconds, len(self.client.download_calls)))


def make_retriever(client, tmp_path, **kwargs):
    sleep = RecordingSleep(client)
    kwargs.setdefault("tag_files", False)
    retriever = ArtifactRetriever(client, str(tmp_path), pacing_delay_s=0.5, sleep=sleep, **kwargs)
    return retriever, sleep


def test_retrieve_one_saves_file_named_after_title(tmp_path):
    client = FakeClient(audio=b"abc")
    retriever, _ = make_retriever(client, tmp_path)

    outcome = retriever.retrieve_one(make_item("a", title="Chill Vibes", audio_url="https://cdn.example/a.mp3"))

    assert outcome.ok
    assert outcome.path == os.path.join(str(tmp_path), "Chill Vibes.mp3")
    with open(outcome.path, "rb") as fh:
        assert fh.read() == b"abc"


def test_retrieve_one_falls_back_to_placeholder_and_wav(tmp_path):
    retriever, _ = make_retriever(FakeClient(), tmp_path)

    outcome = retriever.retrieve_one(make_item("a", title="", audio_url="https://cdn.example/stream?id=1"))

    assert os.path.basename(outcome.path) == "Untitled.wav"


def test_name_collisions_get_a_counter(tmp_path):
    retriever, _ = make_retriever(FakeClient(), tmp_path)
    item = make_item("a", title="Song", audio_url="https://cdn.example/a.wav")

    first = retriever.retrieve_one(item)
    second = retriever.retrieve_one(item)

    assert os.path.basename(first.path) == "Song.wav"
    assert os.path.basename(second.path) == "Song (1).wav"


def test_title_is_sanitized(tmp_path):
    retriever, _ = make_retriever(FakeClient(), tmp_path)

    outcome = retriever.retrieve_one(make_item("a", title="AC/DC: live?", audio_url="u.mp3"))

    assert os.path.basename(outcome.path) == "AC DC live.mp3"


def test_retrieve_one_refuses_items_that_are_not_ready(tmp_path):
    client = FakeClient()
    retriever, _ = make_retriever(client, tmp_path)

    outcome = retriever.retrieve_one(make_item("a", status="streaming"))

    assert not outcome.ok
    assert client.download_calls == []


def test_failed_download_leaves_no_partial_file(tmp_path):
    client = FakeClient(fail_urls={"https://cdn.example/bad.mp3"})
    retriever, _ = make_retriever(client, tmp_path)

    outcome = retriever.retrieve_one(make_item("a", title="Bad", audio_url="https://cdn.example/bad.mp3"))

    assert not outcome.ok
    assert "404" in outcome.error
    assert os.listdir(tmp_path) == []


def test_unusable_download_dir_fails_each_item_without_raising(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_bytes(b"")
    client = FakeClient()
    retriever, _ = make_retriever(client, blocker / "songs")
    items = [make_item("1", title="One"), make_item("2", title="Two")]

    result = retriever.retrieve_batch(items, {"1", "2"})

    assert result.attempted == 2
    assert result.succeeded == 0
    assert all(o.error for o in result.outcomes)
    assert client.download_calls == []


class BarrierClient(FakeClient):
    """Holds every download until two of them are in flight at once."""

    def __init__(self):
        super().__init__()
        self.barrier = threading.Barrier(2, timeout=5)

    def download(self, audio_url, dest_path):
        self.barrier.wait()
        return super().download(audio_url, dest_path)


def test_simultaneous_downloads_of_the_same_name_get_distinct_files(tmp_path):
    client = BarrierClient()
    retriever, _ = make_retriever(client, tmp_path)
    items = [
        make_item("a", title="Untitled", audio_url="https://cdn.example/a"),
        make_item("b", title="", audio_url="https://cdn.example/b"),
    ]

    with ThreadPoolExecutor(max_workers=2) as executor:
        outcomes = list(executor.map(retriever.retrieve_one, items))

    assert all(o.ok for o in outcomes)
    assert outcomes[0].path != outcomes[1].path
    assert sorted(os.listdir(tmp_path)) == ["Untitled (1).wav", "Untitled.wav"]


def test_batch_is_sequential_paced_and_survives_failures(tmp_path):
    items = [
        make_item("1", title="One", audio_url="https://cdn.example/1.mp3"),
        make_item("2", title="Two", audio_url="https://cdn.example/2.mp3"),
        make_item("3", title="Three", audio_url="https://cdn.example/3.mp3"),
    ]
    client = FakeClient(fail_urls={"https://cdn.example/2.mp3"})
    retriever, sleep = make_retriever(client, tmp_path)
    progress = []

    result = retriever.retrieve_batch(
        items, {"1", "2", "3"}, on_progress=lambda done, total, o: progress.append((done, total, o.ok))
    )

    assert result.attempted == 3
    assert result.succeeded == 2
    assert [url for url, _ in client.download_calls] == [i.audio_url for i in items]
    # a pause between each pair, none before the first or after the last
    assert sleep.calls == [(0.5, 1), (0.5, 2)]
    assert progress == [(1, 3, True), (2, 3, False), (3, 3, True)]


def test_batch_only_takes_selected_retrievable_items(tmp_path):
    items = [
        make_item("keep"),
        make_item("unselected"),
        make_item("queued", status="queued", audio_url=None),
        make_item("complete-no-audio", audio_url=None),
    ]
    client = FakeClient()
    retriever, sleep = make_retriever(client, tmp_path)

    result = retriever.retrieve_batch(items, {"keep", "queued", "complete-no-audio", "stale"})

    assert result.attempted == 1
    assert len(client.download_calls) == 1
    assert sleep.calls == []


def test_tagging_failure_does_not_fail_download(tmp_path):
    # not a real WAV; mutagen cannot parse it
    retriever, _ = make_retriever(FakeClient(audio=b"not audio"), tmp_path, tag_files=True)

    outcome = retriever.retrieve_one(make_item("a", title="Junk", tags="pop", audio_url="x.wav"))

    assert outcome.ok
    assert os.path.exists(outcome.path)
