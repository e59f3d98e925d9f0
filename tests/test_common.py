import webbrowser

import pytest

from fitbit_tcx.errors import BrowserLaunchError, PersistenceError
from fitbit_tcx.utils.common import format_number, open_browser, save_to_file
from fitbit_tcx.utils.log import mask_token


@pytest.mark.parametrize(
    "value, expected",
    [(60.0, "60"), (0, "0"), (1000.0, "1000"), (90.5, "90.5"), (1250.125, "1250.125")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_open_browser_raises_when_nothing_opens(monkeypatch):
    monkeypatch.setattr(webbrowser, "open", lambda *args, **kwargs: False)

    with pytest.raises(BrowserLaunchError):
        open_browser("https://example.com")


def test_open_browser_wraps_webbrowser_errors(monkeypatch):
    def broken(*args, **kwargs):
        raise webbrowser.Error("could not locate runnable browser")

    monkeypatch.setattr(webbrowser, "open", broken)

    with pytest.raises(BrowserLaunchError):
        open_browser("https://example.com")


def test_save_to_file_creates_directories(tmp_path):
    target = tmp_path / "a" / "b" / "Swim-1.tcx"

    assert save_to_file(target, "<x/>") == target
    assert target.read_text(encoding="utf-8") == "<x/>"


def test_save_to_file_failure_is_reported(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")

    with pytest.raises(PersistenceError):
        save_to_file(blocker / "Swim-1.tcx", "<x/>")


def test_mask_token_hides_most_of_token():
    assert mask_token("abcdefghijkl") == "abcdef..."
    assert mask_token("") == "<none>"
