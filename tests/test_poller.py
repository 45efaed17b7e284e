from PyQt5 import QtTest

from story_sync.model.timeline import TimelineIndex
from story_sync.sync.poller import PlaybackPoller


def make_poller(player, records, interval_ms=500):
    poller = PlaybackPoller(player, interval_ms=interval_ms, epsilon=0.1)
    poller.set_timeline(TimelineIndex.build(records))
    advances = []
    active = []
    poller.playbackAdvance.connect(advances.append)
    poller.activeChanged.connect(active.append)
    return poller, advances, active


def test_start_samples_immediately(player, records):
    poller, advances, active = make_poller(player, records)
    player.current_time = 6.0
    poller.start()
    assert active == [True]
    assert advances == [1]
    poller.stop()


def test_start_and_stop_are_idempotent(player, records):
    poller, advances, active = make_poller(player, records)
    poller.start()
    poller.start()
    assert poller.is_active()
    poller.stop()
    poller.stop()
    assert not poller.is_active()
    assert active == [True, False]


def test_repeated_samples_report_once(player, records):
    poller, advances, _ = make_poller(player, records)
    poller.start()
    for seconds in (0.0, 5.0, 5.0, 16.0):
        player.current_time = seconds
        poller.sample()
    assert advances == [1, 2]
    poller.stop()


def test_pause_clears_last_reported(player, records):
    poller, advances, _ = make_poller(player, records)
    player.current_time = 5.0
    poller.on_player_state("playing")
    assert poller.last_reported == 1
    poller.on_player_state("paused")
    assert poller.last_reported is None
    poller.on_player_state("playing")
    assert advances == [1, 1]
    poller.on_player_state("ended")
    assert not poller.is_active()


def test_unknown_state_and_errors_stop_polling(player, records):
    poller, _, active = make_poller(player, records)
    poller.on_player_state("playing")
    poller.on_player_state("buffering-ish")
    assert not poller.is_active()
    poller.on_player_state("playing")
    poller.on_player_error("video removed")
    assert not poller.is_active()
    assert active == [True, False, True, False]


def test_seek_forces_sample_only_while_active(player, records):
    poller, advances, _ = make_poller(player, records)
    player.current_time = 20.0
    poller.on_seek(20.0)
    assert advances == []
    poller.start()
    assert advances == [2]
    player.current_time = 5.0
    poller.on_seek(5.0)
    assert advances == [2, 1]
    poller.stop()


def test_player_not_ready_skips_sample(player, records):
    poller, advances, _ = make_poller(player, records)
    player.ready = False
    player.current_time = 16.0
    poller.start()
    assert poller.is_active()
    assert advances == []
    poller.stop()


def test_timer_samples_on_interval(player, records):
    poller, advances, _ = make_poller(player, records, interval_ms=10)
    poller.start()
    player.current_time = 16.0
    QtTest.QTest.qWait(100)
    poller.stop()
    assert advances == [2]
