import json
from datetime import datetime, timezone

import pytest
from googleapiclient.errors import HttpError

from subscribarr.models import SyncSettings, Video
from subscribarr.stages.sync import (
    SyncFailedError,
    sync_subscriptions,
    triage_videos,
)
from subscribarr.youtube.api import QuotaExhaustedError

NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def _ids(videos):
    return [v.video_id for v in videos]


# ------------------------------------------------------------
# triage
# ------------------------------------------------------------


def test_triage_short_wins_over_membership():
    videos = [Video("s1", "short", 45), Video("l1", "long", 600)]

    t = triage_videos(videos, {"s1", "l1"})

    assert _ids(t.shorts) == ["s1"]
    assert _ids(t.already_in_playlist) == ["l1"]
    assert t.candidates == ()


def test_triage_threshold_boundary():
    videos = [Video("a", "a", 60), Video("b", "b", 61), Video("c", "c", 0)]

    t = triage_videos(videos, set())

    assert _ids(t.shorts) == ["a", "c"]
    assert _ids(t.candidates) == ["b"]


def test_triage_skips_seen_ids():
    seen = {"dup"}
    videos = [Video("dup", "x", 600), Video("new", "y", 600)]

    t = triage_videos(videos, frozenset(), seen)

    assert _ids(t.candidates) == ["new"]
    assert seen == {"dup", "new"}


# ------------------------------------------------------------
# full run
# ------------------------------------------------------------


def test_new_long_video_is_added(fakes, sleeper):
    yt = fakes.build_youtube(
        channels=["UC1"],
        uploads={"UC1": ["v1"]},
        catalog={"v1": ("Fresh upload", "PT2M10S")},
    )

    report = sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    assert _ids(report.added) == ["v1"]
    assert report.added[0].duration == 130
    assert fakes.inserted_ids(yt) == ["v1"]
    assert report.counts() == {
        "added": 1,
        "already_in_playlist": 0,
        "error": 0,
        "already_watched": 0,
        "short": 0,
    }
    (search,) = yt.calls_to("search", "list")
    assert search["publishedAfter"] == "2024-03-08T12:00:00Z"


def test_short_video_is_skipped(fakes, sleeper):
    yt = fakes.build_youtube(
        channels=["UC1"],
        uploads={"UC1": ["s1"]},
        catalog={"s1": ("Quick one", "PT45S")},
    )

    report = sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    assert _ids(report.shorts) == ["s1"]
    assert report.added == ()
    assert fakes.inserted_ids(yt) == []


def test_short_already_in_playlist_reported_as_short(fakes, sleeper):
    yt = fakes.build_youtube(
        playlist_pages=[[fakes.playlist_item("s1")]],
        channels=["UC1"],
        uploads={"UC1": ["s1"]},
        catalog={"s1": ("Quick one", "PT30S")},
    )

    report = sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    assert _ids(report.shorts) == ["s1"]
    assert report.already_in_playlist == ()


def test_existing_video_is_not_reinserted(fakes, sleeper):
    yt = fakes.build_youtube(
        playlist_pages=[[fakes.playlist_item("v1")]],
        channels=["UC1"],
        uploads={"UC1": ["v1", "v2"]},
        catalog={"v1": ("Old", "PT10M"), "v2": ("New", "PT10M")},
    )

    report = sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    assert _ids(report.already_in_playlist) == ["v1"]
    assert _ids(report.added) == ["v2"]
    assert fakes.inserted_ids(yt) == ["v2"]


def test_dry_run_reports_candidates_without_writing(fakes, sleeper):
    yt = fakes.build_youtube(
        channels=["UC1"],
        uploads={"UC1": ["v1", "v2"]},
        catalog={"v1": ("One", "PT5M"), "v2": ("Two", "PT5M")},
    )

    report = sync_subscriptions(
        yt, "PL1", SyncSettings(insert_enabled=False), now=NOW, sleep=sleeper
    )

    assert report.dry_run is True
    assert _ids(report.added) == ["v1", "v2"]
    assert yt.calls_to("playlistItems", "insert") == []


def test_second_run_is_idempotent(fakes, sleeper):
    playlist = []

    def _insert(body, **_):
        vid = body["snippet"]["resourceId"]["videoId"]
        playlist.append(fakes.playlist_item(vid))
        return {"id": f"PLI_{vid}"}

    def _youtube():
        return fakes.build_youtube(
            playlist_pages=[list(playlist)],
            channels=["UC1"],
            uploads={"UC1": ["v1", "v2"]},
            catalog={"v1": ("One", "PT5M"), "v2": ("Two", "PT5M")},
            insert=_insert,
        )

    first = sync_subscriptions(_youtube(), "PL1", now=NOW, sleep=sleeper)
    second_yt = _youtube()
    second = sync_subscriptions(second_yt, "PL1", now=NOW, sleep=sleeper)

    assert _ids(first.added) == ["v1", "v2"]
    assert second.added == ()
    assert _ids(second.already_in_playlist) == ["v1", "v2"]
    assert second_yt.calls_to("playlistItems", "insert") == []


def test_insert_failure_raises_with_full_report(fakes, sleeper):
    def _insert(body, **_):
        vid = body["snippet"]["resourceId"]["videoId"]
        if vid == "bad":
            raise fakes.http_error(404, "Video not found")
        return {"id": f"PLI_{vid}"}

    yt = fakes.build_youtube(
        channels=["UC1"],
        uploads={"UC1": ["v1", "bad", "v2"]},
        catalog={
            "v1": ("One", "PT5M"),
            "bad": ("Broken", "PT5M"),
            "v2": ("Two", "PT5M"),
        },
        insert=_insert,
    )

    with pytest.raises(SyncFailedError) as exc_info:
        sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    err = exc_info.value
    assert _ids(err.report.added) == ["v1", "v2"]
    assert _ids(err.errors) == ["bad"]
    assert fakes.inserted_ids(yt) == ["v1", "bad", "v2"]

    message = str(err)
    assert message.startswith("Error adding to playlist. ")
    payload = json.loads(message[len("Error adding to playlist. "):])
    assert payload == [
        {
            "id": "bad",
            "title": "Broken",
            "duration": 300,
            "error": {"message": "HTTP 404: Video not found", "retryCount": 0},
        }
    ]


def test_persistent_conflict_reports_retry_ceiling(fakes, sleeper):
    def _insert(**_):
        raise fakes.http_error(409, "conflict")

    yt = fakes.build_youtube(
        channels=["UC1"],
        uploads={"UC1": ["v1"]},
        catalog={"v1": ("One", "PT5M")},
        insert=_insert,
    )

    with pytest.raises(SyncFailedError) as exc_info:
        sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    (failed,) = exc_info.value.errors
    assert failed.error.retry_count == 6


def test_channel_read_failure_aborts_run(fakes, sleeper):
    yt = fakes.build_youtube(
        channels=["UC1", "UC2", "UC3"],
        uploads={"UC1": ["v1"], "UC3": ["v3"]},
        catalog={"v1": ("One", "PT5M"), "v3": ("Three", "PT5M")},
    )

    def _search(channelId, **_):
        if channelId == "UC2":
            raise fakes.http_error(500, "backend error")
        return {"items": [{"id": {"videoId": f"v{channelId[-1]}"}}]}

    yt.on("search", "list", _search)

    with pytest.raises(HttpError):
        sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    searched = [kw["channelId"] for kw in yt.calls_to("search", "list")]
    assert searched == ["UC1", "UC2"]
    assert yt.calls_to("playlistItems", "insert") == []


def test_quota_exhaustion_propagates(fakes, sleeper):
    yt = fakes.build_youtube(channels=["UC1"])

    def _quota(**_):
        raise fakes.http_error(403, "quota", reasons=["quotaExceeded"])

    yt.on("subscriptions", "list", _quota)

    with pytest.raises(QuotaExhaustedError):
        sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)


def test_duplicate_video_across_channels_added_once(fakes, sleeper):
    yt = fakes.build_youtube(
        channels=["UC1", "UC2"],
        uploads={"UC1": ["collab"], "UC2": ["collab", "solo"]},
        catalog={"collab": ("Collab", "PT8M"), "solo": ("Solo", "PT8M")},
    )

    report = sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    assert _ids(report.added) == ["collab", "solo"]
    assert fakes.inserted_ids(yt) == ["collab", "solo"]


def test_inserts_follow_channel_then_discovery_order(fakes, sleeper):
    yt = fakes.build_youtube(
        channels=["UC2", "UC1"],
        uploads={"UC1": ["a1", "a2"], "UC2": ["b1", "b2"]},
        catalog={v: (v, "PT3M") for v in ["a1", "a2", "b1", "b2"]},
    )

    sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    assert fakes.inserted_ids(yt) == ["b1", "b2", "a1", "a2"]


def test_no_subscriptions_is_empty_success(fakes, sleeper):
    yt = fakes.build_youtube()

    report = sync_subscriptions(yt, "PL1", now=NOW, sleep=sleeper)

    assert sum(report.counts().values()) == 0
    assert yt.calls_to("search", "list") == []
