"""Tests for the phonecrawl command line."""

import pytest
import respx
from httpx import Response

from phonecrawl.cli import build_parser, main


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)  # no stray .env
    monkeypatch.setenv("MAX_REQUEST_DELAY", "0")
    monkeypatch.setenv("WORKERS", "2")


@pytest.fixture
def domains_csv(tmp_path):
    path = tmp_path / "domains.csv"
    path.write_text("domain\nalpha.com\nbeta.com\n", encoding="utf-8")
    return path


def test_parser_scrape_alias():
    args = build_parser().parse_args(["s", "domains.csv", "--workers", "3"])
    assert args.csv_path == "domains.csv"
    assert args.workers == 3


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


@respx.mock
def test_scrape_command(domains_csv, capsys):
    respx.get("https://alpha.com/").mock(
        return_value=Response(
            200,
            html="<html><body><p>Phone: 541-754-3010</p></body></html>",
            headers={"content-type": "text/html"},
        )
    )
    respx.get("https://beta.com/").mock(return_value=Response(503))

    assert main(["scrape", str(domains_csv)]) == 0

    out = capsys.readouterr().out
    assert "https://alpha.com: +1 541-754-3010" in out
    assert "Collected phone numbers for 1 domain(s)" in out
    assert "Failed to scrape 1 domain(s)" in out


@respx.mock
def test_check_command(domains_csv, capsys):
    respx.head("https://alpha.com").mock(return_value=Response(200))
    respx.head("https://beta.com").mock(return_value=Response(404))

    assert main(["check", str(domains_csv)]) == 0

    out = capsys.readouterr().out
    assert "HEAD 'https://alpha.com' - 200" in out
    assert "HEAD 'https://beta.com' - 404" in out


@respx.mock
def test_phone_command(capsys):
    respx.get("https://alpha.com/").mock(
        return_value=Response(
            200,
            html='<html><body><a href="tel:5417543010">Call</a></body></html>',
            headers={"content-type": "text/html"},
        )
    )

    assert main(["phone", "alpha.com"]) == 0

    out = capsys.readouterr().out
    assert '+1 541-754-3010\ta[href="tel:< phone number >"]' in out


def test_phone_command_invalid_url(capsys):
    assert main(["phone", "ftp://alpha.com"]) == 1
    assert "ftp" in capsys.readouterr().err


def test_scrape_command_invalid_csv(tmp_path, capsys):
    path = tmp_path / "bad.csv"
    path.write_text("domain\nalpha.com\nftp://beta.com\n", encoding="utf-8")

    assert main(["scrape", str(path)]) == 1

    err = capsys.readouterr().err
    assert "1 invalid CSV lines" in err
    assert "Invalid line 2 'ftp://beta.com'" in err


def test_scrape_command_missing_file(tmp_path, capsys):
    assert main(["scrape", str(tmp_path / "missing.csv")]) == 1
    assert "Error:" in capsys.readouterr().err
