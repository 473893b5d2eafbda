"""Tests for the command line interface."""

from click.testing import CliRunner
from httpx import Response

from chanfetch.cli import cli

from .conftest import API_BASE, LM_1, make_board, make_catalog, make_thread, make_threadlist

ARGS = ["--interval", "0.01"]


def ok(body):
    return Response(200, json=body, headers={"Last-Modified": LM_1})


def test_boards_lists_every_board(api):
    api.get("/boards.json").mock(return_value=ok({"boards": [make_board("po"), make_board("g", ws=0)]}))
    result = CliRunner().invoke(cli, [*ARGS, "boards"])

    assert result.exit_code == 0, result.output
    assert "/po/" in result.output
    assert "/g/" in result.output


def test_catalog_respects_limit(api):
    api.get("/po/catalog.json").mock(return_value=ok(make_catalog([101, 102, 103])))
    result = CliRunner().invoke(cli, [*ARGS, "catalog", "po", "--limit", "2"])

    assert result.exit_code == 0, result.output
    assert "101" in result.output
    assert "103" not in result.output


def test_threads_command(api):
    api.get("/po/threads.json").mock(return_value=ok(make_threadlist([201, 202])))
    result = CliRunner().invoke(cli, [*ARGS, "threads", "po"])

    assert result.exit_code == 0, result.output
    assert "202" in result.output


def test_archive_reports_oldest(api):
    api.get("/po/archive.json").mock(return_value=ok([560003, 560001, 560002]))
    result = CliRunner().invoke(cli, [*ARGS, "archive", "po"])

    assert result.exit_code == 0, result.output
    assert "560001" in result.output


def test_thread_prints_posts(api):
    api.get("/po/thread/570368.json").mock(return_value=ok(make_thread(570368, [570369])))
    result = CliRunner().invoke(cli, [*ARGS, "thread", "po", "570368"])

    assert result.exit_code == 0, result.output
    assert "op comment" in result.output
    assert "reply 570369" in result.output


def test_missing_thread_exits_nonzero(api):
    api.get("/po/thread/1.json").mock(return_value=Response(404))
    result = CliRunner().invoke(cli, [*ARGS, "thread", "po", "1"])

    assert result.exit_code == 1
    assert "404" in result.output


def test_watch_stops_when_archived(api, monkeypatch):
    monkeypatch.setenv("CHAN_THREAD_COOLDOWN", "0")
    api.get("/po/thread/570368.json").mock(
        side_effect=[
            ok(make_thread(570368)),
            Response(200, json=make_thread(570368, [570370], archived=1, archived_on=1445412480), headers={"Last-Modified": LM_1}),
        ]
    )
    result = CliRunner().invoke(cli, [*ARGS, "watch", "po", "570368"])

    assert result.exit_code == 0, result.output
    assert "reply 570370" in result.output
    assert "archived" in result.output


def test_environment_settings_reach_requests(api, monkeypatch):
    monkeypatch.setenv("CHAN_USER_AGENT", "archiver-bot/2.0")
    route = api.get("/boards.json").mock(return_value=ok({"boards": [make_board("po")]}))
    result = CliRunner().invoke(cli, [*ARGS, "boards"])

    assert result.exit_code == 0, result.output
    assert route.calls.last.request.headers["User-Agent"] == "archiver-bot/2.0"


def test_flags_override_environment(api, monkeypatch):
    monkeypatch.setenv("CHAN_API_BASE", "https://unreachable.invalid")
    route = api.get("/boards.json").mock(return_value=ok({"boards": [make_board("po")]}))
    result = CliRunner().invoke(cli, ["--api-base", API_BASE, *ARGS, "boards"])

    assert result.exit_code == 0, result.output
    assert route.called


def test_thread_prints_image_links(api, monkeypatch):
    monkeypatch.setenv("CHAN_IMAGE_BASE", "https://img.example")
    api.get("/po/thread/570368.json").mock(
        return_value=ok(make_thread(570368, tim=1445412480123, ext=".png"))
    )
    result = CliRunner().invoke(cli, [*ARGS, "thread", "po", "570368"])

    assert result.exit_code == 0, result.output
    assert "https://img.example/po/1445412480123.png" in result.output
