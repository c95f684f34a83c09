import os

import pytest
from conftest import FakeClient, make_item

from core.config import AppConfig
from core.errors import NoValidJobs
from core.models import GenerationMode, JobSpec
from core.state import AppState
from ui.session_controller import SessionController

LIBRARY = [
    {"id": "a", "title": "Chill Vibes", "status": "complete", "audio_url": "https://cdn.example/a.mp3"},
    {"id": "b", "title": "Night Drive", "status": "complete", "audio_url": "https://cdn.example/b.mp3",
     "metadata": {"tags": "synthwave"}},
    {"id": "c", "title": "Pending", "status": "queued"},
]


@pytest.fixture
def session(qtbot, tmp_path):
    client = FakeClient(items=LIBRARY)
    state = AppState(AppConfig(settle_delay_s=0.05, pacing_delay_s=0, download_dir=str(tmp_path), tag_downloads=False))
    state.client = client
    notes = []
    state.notification.connect(notes.append)
    controller = SessionController(state)
    yield controller, client, notes
    qtbot.waitUntil(lambda: not controller._workers and not controller.sync._workers, timeout=3000)


def load(qtbot, controller):
    with qtbot.waitSignal(controller.items_changed, timeout=3000):
        controller.load()


def test_generate_reports_attempted_and_refreshes_after_settle(qtbot, session):
    controller, client, notes = session
    client.fail_prompts = {"P2"}
    controller.set_mode(GenerationMode.SIMPLE)

    with qtbot.waitSignal(controller.submitted, timeout=3000) as blocker:
        assert controller.generate([JobSpec(prompt="P1"), JobSpec(prompt="P2"), JobSpec()])

    result = blocker.args[0]
    assert result.attempted == 2
    assert result.failed == 1
    assert not controller.generating
    assert notes[-1].message == "Started generating 2 song(s)!"
    assert client.get_calls == 0

    with qtbot.waitSignal(controller.sync.refreshed, timeout=3000):
        pass
    assert client.get_calls == 1


def test_generate_with_no_valid_jobs_does_nothing(session):
    controller, client, notes = session
    controller.set_mode(GenerationMode.CUSTOM)

    assert controller.generate([JobSpec(prompt="simple only")]) is False

    assert client.generate_calls == [] and client.custom_calls == []
    assert notes[-1].message == "Please fill in at least one form!"
    assert not controller.generating


def test_generate_reports_the_submitters_rejection(session, monkeypatch):
    controller, client, notes = session

    def reject(jobs, mode):
        raise NoValidJobs("Nothing to send.")

    monkeypatch.setattr(controller.submitter, "prepare", reject)

    assert controller.generate([JobSpec(prompt="P1")]) is False
    assert notes[-1].message == "Nothing to send."
    assert notes[-1].notify_type == "warning"
    assert client.generate_calls == []
    assert not controller.generating


def test_crashed_generation_batch_clears_generating(qtbot, session, monkeypatch):
    controller, _, notes = session

    def crash(jobs, mode):
        raise RuntimeError("pool exploded")

    monkeypatch.setattr(controller.submitter, "submit", crash)

    with qtbot.waitSignal(controller.generating_changed, timeout=3000, check_params_cb=lambda v: v is False):
        assert controller.generate([JobSpec(prompt="P1")])

    assert not controller.generating
    assert notes[-1].notify_type == "error"
    assert "pool exploded" in notes[-1].message


def test_filter_and_select_all_use_filtered_view(qtbot, session):
    controller, _, _ = session
    load(qtbot, controller)

    controller.set_query("SYNTH")
    assert [i.id for i in controller.filtered_items()] == ["b"]

    controller.select_all()
    assert controller.selection.ids == frozenset({"b"})
    assert not controller.can_select_all()

    controller.clear_selection()
    controller.set_query("")
    assert controller.can_select_all()
    controller.select_all()
    assert controller.selection.ids == frozenset({"a", "b"})


def test_download_selected_covers_hidden_selected_items(qtbot, session, tmp_path):
    controller, client, notes = session
    load(qtbot, controller)
    controller.toggle("a")
    controller.toggle("b")
    controller.toggle("c")
    controller.set_query("night")

    with qtbot.waitSignal(controller.downloaded, timeout=3000) as blocker:
        assert controller.download_selected()

    assert blocker.args[0].attempted == 2
    assert [url for url, _ in client.download_calls] == [
        "https://cdn.example/a.mp3",
        "https://cdn.example/b.mp3",
    ]
    assert sorted(os.listdir(tmp_path)) == ["Chill Vibes.mp3", "Night Drive.mp3"]
    assert notes[-1].message == "Downloaded 2 song(s)!"
    assert not controller.downloading


def test_download_into_unusable_dir_finishes_and_clears_downloading(qtbot, session, tmp_path):
    controller, client, notes = session
    load(qtbot, controller)
    blocker_file = tmp_path / "not-a-dir"
    blocker_file.write_bytes(b"")
    controller.retriever.download_dir = str(blocker_file / "songs")
    controller.select_all()

    with qtbot.waitSignal(controller.downloaded, timeout=3000) as blocker:
        assert controller.download_selected()

    assert blocker.args[0].attempted == 2
    assert blocker.args[0].succeeded == 0
    assert client.download_calls == []
    assert not controller.downloading
    assert controller.download_selected()


def test_crashed_batch_download_clears_downloading(qtbot, session, monkeypatch):
    controller, _, notes = session
    load(qtbot, controller)
    controller.select_all()

    def crash(items, selection, on_progress=None):
        raise RuntimeError("disk vanished")

    monkeypatch.setattr(controller.retriever, "retrieve_batch", crash)

    with qtbot.waitSignal(controller.downloading_changed, timeout=3000, check_params_cb=lambda v: v is False):
        assert controller.download_selected()

    assert not controller.downloading
    assert notes[-1].notify_type == "error"


def test_download_one_failure_is_notified(qtbot, session):
    controller, client, notes = session
    load(qtbot, controller)
    client.fail_urls = {"https://cdn.example/a.mp3"}

    with qtbot.waitSignal(controller.app_state.notification, timeout=3000) as blocker:
        controller.download_one("a")

    assert blocker.args[0].message == "Download failed. Please try again."
    assert blocker.args[0].notify_type == "error"


def test_refresh_failure_is_notified_and_cache_kept(qtbot, session):
    controller, client, notes = session
    load(qtbot, controller)
    client.fail_refresh = True

    with qtbot.waitSignal(controller.sync.failed, timeout=3000):
        controller.refresh()

    assert len(controller.repository) == 3
    assert notes[-1].notify_type == "error"


def test_preview_url_resolves_relative_audio_against_the_service(session):
    controller, _, _ = session
    controller.repository.replace([
        make_item("rel", audio_url="/files/rel.mp3"),
        make_item("abs", audio_url="https://cdn.example/abs.mp3"),
        make_item("queued", status="queued", audio_url=None),
    ])

    assert controller.preview_url("rel") == "http://svc.test/files/rel.mp3"
    assert controller.preview_url("abs") == "https://cdn.example/abs.mp3"
    assert controller.preview_url("queued") is None
    assert controller.preview_url("missing") is None
