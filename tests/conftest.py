import json
import logging
from types import SimpleNamespace

import pytest
from googleapiclient.errors import HttpError


@pytest.fixture(autouse=True)
def clean_env_and_logging(monkeypatch, tmp_path):
    """
    Ensure tests don't leak env, logger state, or cached env views.
    """
    keys = [
        "SUBSCRIBARR_COMMAND",
        "SUBSCRIBARR_RUN_ID",
        "SUBSCRIBARR_PLAYLIST_ID",
        "SUBSCRIBARR_WINDOW_DAYS",
        "SUBSCRIBARR_DRY_RUN",
        "SUBSCRIBARR_MAX_RETRIES",
        "SUBSCRIBARR_BACKOFF_BASE_SEC",
        "SUBSCRIBARR_VERBOSE",
        "SUBSCRIBARR_QUIET",
        "LOG_LEVEL",
        "LOG_RETENTION",
    ]
    for k in keys:
        monkeypatch.delenv(k, raising=False)

    monkeypatch.setenv("SUBSCRIBARR_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("SUBSCRIBARR_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("SUBSCRIBARR_AUTH_DIR", str(tmp_path / "auth"))
    monkeypatch.setenv("SUBSCRIBARR_OUT_DIR", str(tmp_path / "out"))

    from subscribarr.env import reset_env_caches
    import subscribarr.logger.state as log_state

    reset_env_caches()
    log_state.INITIALIZED = False
    log_state.LOG_FILE_PATH = None

    root = logging.getLogger()
    saved_level = root.level
    for h in list(root.handlers):
        root.removeHandler(h)

    yield

    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.setLevel(saved_level)
    reset_env_caches()


# ------------------------------------------------------------
# googleapiclient fakes
# ------------------------------------------------------------


def make_http_error(status, message="", reasons=()):
    content = json.dumps(
        {
            "error": {
                "code": status,
                "message": message,
                "errors": [{"reason": r, "message": message} for r in reasons],
            }
        }
    ).encode("utf-8")
    return HttpError(SimpleNamespace(status=status, reason=message), content)


class FakeRequest:
    def __init__(self, handler, kwargs):
        self._handler = handler
        self._kwargs = kwargs

    def execute(self):
        return self._handler(**self._kwargs)


class FakeResource:
    def __init__(self, youtube, name):
        self._youtube = youtube
        self._name = name

    def __getattr__(self, method):
        if method.startswith("_"):
            raise AttributeError(method)

        def _build(**kwargs):
            self._youtube.calls.append((self._name, method, kwargs))
            handler = self._youtube.handlers.get((self._name, method))
            if handler is None:
                raise AssertionError(f"unexpected call: {self._name}.{method}")
            return FakeRequest(handler, kwargs)

        return _build


class FakeYouTube:
    """Stand-in for the googleapiclient YouTube resource."""

    def __init__(self):
        self.handlers = {}
        self.calls = []

    def on(self, resource, method, handler):
        self.handlers[(resource, method)] = handler
        return self

    def calls_to(self, resource, method):
        return [kw for r, m, kw in self.calls if (r, m) == (resource, method)]

    def __getattr__(self, resource):
        if resource.startswith("_"):
            raise AttributeError(resource)
        return lambda: FakeResource(self, resource)


def paged(pages):
    """Handler serving ``pages`` (lists of items) with page-N continuation tokens."""

    def _handler(pageToken=None, **_):
        index = 0 if pageToken is None else int(pageToken.split("-")[1])
        resp = {"items": pages[index]}
        if index + 1 < len(pages):
            resp["nextPageToken"] = f"page-{index + 1}"
        return resp

    return _handler


def playlist_item(video_id, title=""):
    return {"contentDetails": {"videoId": video_id}, "snippet": {"title": title}}


def subscription(channel_id):
    return {"snippet": {"resourceId": {"channelId": channel_id}}}


def video_item(video_id, title, duration):
    return {
        "id": video_id,
        "snippet": {"title": title},
        "contentDetails": {"duration": duration},
    }


def build_youtube(
    *,
    playlist_pages=([],),
    channels=(),
    uploads=None,
    catalog=None,
    insert=None,
):
    """
    Wire a FakeYouTube for a full sync run.

    uploads: {channel_id: [video_id, ...]} returned by search.list
    catalog: {video_id: (title, iso_duration)} returned by videos.list
    insert:  handler for playlistItems.insert (default: always succeeds)
    """
    uploads = uploads or {}
    catalog = catalog or {}
    yt = FakeYouTube()

    yt.on("playlistItems", "list", paged(list(playlist_pages)))
    yt.on("subscriptions", "list", paged([[subscription(c) for c in channels]]))

    def _search(channelId, **_):
        return {"items": [{"id": {"videoId": v}} for v in uploads.get(channelId, [])]}

    def _videos(id, **_):
        items = []
        for vid in id.split(","):
            if vid in catalog:
                title, duration = catalog[vid]
                items.append(video_item(vid, title, duration))
        return {"items": items}

    def _insert(body, **_):
        return {"id": f"PLI_{body['snippet']['resourceId']['videoId']}"}

    yt.on("search", "list", _search)
    yt.on("videos", "list", _videos)
    yt.on("playlistItems", "insert", insert or _insert)
    return yt


def inserted_ids(yt):
    return [
        kw["body"]["snippet"]["resourceId"]["videoId"]
        for kw in yt.calls_to("playlistItems", "insert")
    ]


class SleepRecorder:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def fakes():
    return SimpleNamespace(
        FakeYouTube=FakeYouTube,
        build_youtube=build_youtube,
        http_error=make_http_error,
        paged=paged,
        playlist_item=playlist_item,
        subscription=subscription,
        video_item=video_item,
        inserted_ids=inserted_ids,
    )


@pytest.fixture
def sleeper():
    return SleepRecorder()
