import json

import pytest

from conftest import FakeMap, FakePanels
from story_sync import StorySession
from story_sync.model.entities import Authority
from story_sync.model.settings import AppSettings, MapSettings


@pytest.fixture()
def chapters():
    return [
        {"title": f"Chapter {i}", "timestamp": f"0:{i * 10:02d}", "latitude": i, "longitude": i}
        for i in range(5)
    ] + [{"title": "", "description": ""}]


@pytest.fixture()
def session(player, container, chapters):
    fake_map = FakeMap(marker_indices=range(5))
    panels = FakePanels()
    session = StorySession(fake_map, container, player, panels, AppSettings(map=MapSettings(transition_ms=0)))
    session.fake_map = fake_map
    session.panels = panels
    session.changes = []
    session.focusChanged.connect(lambda prev, new: session.changes.append((prev, new)))
    session.load(chapters)
    yield session
    session.shutdown()


def test_load_builds_timeline_and_focuses_scroll_position(session):
    assert len(session.timeline) == 5
    assert session.fake_map.transitions[0] == (38.89, -77.03, 14)
    assert session.state.active_index == 0
    assert session.changes == [(None, 0)]
    assert session.panels.active_indices() == [0]


def test_scroll_moves_focus_and_camera(session, container):
    container.scroll_to(200.0)
    assert session.changes[-1] == (0, 2)
    assert session.fake_map.transitions[-1] == (2.0, 2.0, 15)
    assert [i for i, m in session.fake_map.markers.items() if m.active] == [2]


def test_playback_suppresses_scroll_until_pause(session, player, container):
    player.current_time = 31.0
    player.stateChanged.emit("playing")
    assert session.state.playback_is_driving
    assert session.state.active_index == 3

    container.scroll_to(100.0)
    container.scroll_to(400.0)
    assert session.state.active_index == 3

    player.stateChanged.emit("paused")
    assert not session.state.playback_is_driving
    container.scroll_to(100.0)
    assert session.state.active_index == 1
    assert session.state.authority is Authority.SCROLL


def test_click_seeks_and_reconciles_with_playback(session, player):
    player.current_time = 11.0
    player.stateChanged.emit("playing")
    session.click(4)
    assert player.seeks == [40.0]
    assert session.state.active_index == 4
    assert session.poller.last_reported == 4
    assert session.changes[-2:] == [(0, 1), (1, 4)]


def test_player_error_degrades_to_scroll_and_click(session, player, container):
    degraded = []
    session.degradedChanged.connect(degraded.append)
    player.stateChanged.emit("playing")
    player.errorOccurred.emit("embedding disallowed")
    assert session.degraded
    assert degraded == ["embedding disallowed"]
    assert not session.state.playback_is_driving
    container.scroll_to(300.0)
    assert session.state.active_index == 3


def test_map_ready_flushes_deferred_transition(player, container, chapters):
    fake_map = FakeMap()
    fake_map.ready = False
    session = StorySession(fake_map, container, player)
    session.load(chapters)
    assert fake_map.transitions == []
    fake_map.ready = True
    session.map_ready()
    assert fake_map.transitions == [(0.0, 0.0, 15)]
    session.shutdown()


def test_shutdown_disconnects_inputs(session, player, container):
    session.shutdown()
    session.shutdown()
    before = list(session.changes)
    container.scroll_to(400.0)
    player.stateChanged.emit("playing")
    assert session.changes == before
    assert not session.poller.is_active()
    with pytest.raises(RuntimeError):
        session.load([])


def test_session_without_player_uses_scroll_only(container, chapters):
    fake_map = FakeMap()
    session = StorySession(fake_map, container)
    session.load(chapters)
    assert session.poller is None
    session.click(3)
    assert session.state.active_index == 3
    session.shutdown()


def test_from_settings_file_reads_overrides(tmp_path, player, container):
    (tmp_path / "story_sync.json").write_text(json.dumps({"playback": {"poll_interval_ms": 250}}))
    session = StorySession.from_settings_file(tmp_path, FakeMap(), container, player)
    assert session.settings.playback.poll_interval_ms == 250
    assert session.poller.interval_ms == 250
    session.shutdown()


def test_player_recovery_clears_degraded_mode(session, player):
    states = []
    session.degradedChanged.connect(states.append)
    player.errorOccurred.emit("video removed")
    assert session.degraded
    player.stateChanged.emit("paused")
    assert session.degraded
    player.stateChanged.emit("playing")
    assert not session.degraded
    assert states == ["video removed", ""]
    assert session.state.playback_is_driving


def test_reload_reports_focus_cleared(session, chapters):
    assert session.state.active_index == 0
    session.load(chapters[:2])
    assert (0, None) in session.changes
    assert session.changes[-1] == (None, 0)
