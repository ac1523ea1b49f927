"""Tests for the ``pagecraft`` command line."""

from __future__ import annotations

import json
import typing as typ

import pytest
from bs4 import BeautifulSoup

from pagecraft import cli
from pagecraft.blog import (
    BlogArticle,
    BlogClient,
    BlogClientError,
    BlogListing,
    BlogPostSummary,
)
from pagecraft.config import load_site_config
from pagecraft.publish import PublishError

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


@pytest.fixture
def draft_dir(tmp_path: Path) -> Path:
    """Directory where the CLI keeps drafts between invocations."""
    return tmp_path / "drafts"


def test_set_persists_draft_between_invocations(
    config_file: Path, draft_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A value set in one command is read back by the next."""
    cli.set_value(
        "sections.hero-main.shortHeadline",
        "Tax help, fast",
        config=config_file,
        draft_dir=draft_dir,
    )
    cli.get("sections.hero-main.shortHeadline", config=config_file, draft_dir=draft_dir)

    out = capsys.readouterr().out
    assert "sections.hero-main.shortHeadline updated (1 pending)" in out, (
        f"expected an update confirmation, got {out!r}"
    )
    assert "Tax help, fast\neditable: yes" in out, f"expected the draft value, got {out!r}"
    draft = json.loads((draft_dir / "preview-summit.json").read_text(encoding="utf-8"))
    assert draft == {"sections.hero-main.shortHeadline": "Tax help, fast"}, (
        f"unexpected draft file {draft!r}"
    )


def test_set_refuses_read_only_fields(config_file: Path, draft_dir: Path) -> None:
    """Writing a non-editable path exits with an error."""
    with pytest.raises(SystemExit, match="not editable"):
        cli.set_value(
            "sections.hero-main.primaryCta.href",
            "#elsewhere",
            config=config_file,
            draft_dir=draft_dir,
        )


def test_set_coerces_numbers(
    tmp_path: Path, draft_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Numeric fields receive numbers rather than strings."""
    config = tmp_path / "site.yaml"
    config.write_text(
        "schema:\n  site:\n    founded: {type: number, editable: true}\n"
        "data:\n  site:\n    founded: 2001\n",
        encoding="utf-8",
    )
    cli.set_value("site.founded", "2010", config=config, draft_dir=draft_dir)
    cli.get("site.founded", config=config, draft_dir=draft_dir)
    out = capsys.readouterr().out
    assert "2010\neditable: yes" in out, f"expected the numeric value, got {out!r}"
    draft = json.loads((draft_dir / "preview-default.json").read_text(encoding="utf-8"))
    assert draft == {"site.founded": 2010}, f"expected an int in the draft, got {draft!r}"


def test_section_commands(
    config_file: Path, draft_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Adding and removing sections is reflected in the section listing."""
    cli.add_section("hero", config=config_file, draft_dir=draft_dir)
    cli.remove_section("about", config=config_file, draft_dir=draft_dir)
    cli.add_section("whyChooseUs", position=0, config=config_file, draft_dir=draft_dir)
    capsys.readouterr()

    cli.sections(config=config_file, draft_dir=draft_dir)

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "  10  why-choose-us  (whyChooseUs, enabled)",
        "  20  hero-main  (hero, enabled)",
        "  30  services  (services, disabled)",
        "  40  contact  (contact, enabled)",
    ], f"unexpected section listing {lines!r}"


def test_types_lists_picker_status(
    config_file: Path, draft_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """The picker shows added and addable types."""
    cli.types(config=config_file, draft_dir=draft_dir)
    out = capsys.readouterr().out
    assert "hero: Hero [added, cannot add]" in out, f"unexpected hero status in {out!r}"
    assert "whyChooseUs: Why Choose Us [available, can add]" in out, (
        f"unexpected why-choose-us status in {out!r}"
    )


def test_item_commands(
    config_file: Path, draft_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Array commands report their effect and no-ops."""
    path = "sections.services.items"
    cli.add_item(path, config=config_file, draft_dir=draft_dir)
    cli.move_item(path, 0, 2, config=config_file, draft_dir=draft_dir)
    cli.remove_item(path, 3, config=config_file, draft_dir=draft_dir)
    cli.add_item(path, config=config_file, draft_dir=draft_dir)

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        f"no change: cannot add an item to '{path}'",
        f"{path}: moved item 0 to 2",
        f"{path}: removed item 3",
        f"{path}: 4 items",
    ], f"unexpected output {lines!r}"


def test_publish_writes_config_and_clears_draft(
    config_file: Path, draft_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Publishing rewrites the data block and removes the draft file."""
    cli.set_value("site.brand", "Summit Ledger", config=config_file, draft_dir=draft_dir)
    cli.publish(config=config_file, draft_dir=draft_dir)

    out = capsys.readouterr().out
    assert "published 1 edit(s)" in out, f"expected a publish summary, got {out!r}"
    assert not (draft_dir / "preview-summit.json").exists(), "expected draft removed"
    reloaded = load_site_config(config_file)
    assert reloaded.data.site["brand"] == "Summit Ledger", "expected brand persisted"
    assert reloaded.schema.get_section_type("hero") is not None, (
        "expected the schema block to survive the rewrite"
    )

    cli.publish(config=config_file, draft_dir=draft_dir)
    assert "nothing to publish" in capsys.readouterr().out, (
        "expected an empty draft to publish nothing"
    )


def test_publish_failure_exits_and_keeps_draft(
    config_file: Path, draft_dir: Path, mocker: MockerFixture
) -> None:
    """A backend failure exits non-zero and leaves the draft on disk."""
    cli.set_value("site.brand", "Pending", config=config_file, draft_dir=draft_dir)
    mocker.patch(
        "pagecraft.publish.YamlPublishBackend.publish",
        side_effect=PublishError("read-only filesystem"),
    )
    with pytest.raises(SystemExit, match="read-only filesystem"):
        cli.publish(config=config_file, draft_dir=draft_dir)
    assert (draft_dir / "preview-summit.json").exists(), "expected the draft to remain"


def test_discard_removes_draft(
    config_file: Path, draft_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Discard reports how many edits were dropped."""
    cli.set_value("site.city", "Tacoma, WA", config=config_file, draft_dir=draft_dir)
    cli.discard(config=config_file, draft_dir=draft_dir)
    assert "discarded 1 pending edit(s)" in capsys.readouterr().out, (
        "expected the discard summary"
    )
    assert not (draft_dir / "preview-summit.json").exists(), "expected draft removed"


def test_render_writes_preview(
    config_file: Path, draft_dir: Path, tmp_path: Path
) -> None:
    """The render command writes the preview with draft values."""
    cli.set_value("site.brand", "Draft Brand", config=config_file, draft_dir=draft_dir)
    output = tmp_path / "out" / "preview.html"
    cli.render(config=config_file, draft_dir=draft_dir, output=output)

    soup = BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")
    brand = soup.select_one('[data-path="site.brand"]')
    assert brand is not None, "expected the brand field in the preview"
    assert brand.get_text() == "Draft Brand", f"unexpected brand {brand.get_text()!r}"


def test_blog_lists_posts(
    config_file: Path, mocker: MockerFixture, capsys: pytest.CaptureFixture[str]
) -> None:
    """The blog command lists posts for the config's site id."""
    list_posts = mocker.patch.object(
        BlogClient,
        "list_posts",
        return_value=BlogListing(
            items=[BlogPostSummary(slug="qbo-rules", title="QBO Bank Rules")], total=1
        ),
    )
    cli.blog(config=config_file)

    list_posts.assert_called_once_with("summit", page=1, page_size=10)
    out = capsys.readouterr().out
    assert "qbo-rules: QBO Bank Rules" in out, f"expected the post line, got {out!r}"
    assert "1 of 1 post(s)" in out, f"expected the listing summary, got {out!r}"


def test_blog_shows_article(
    config_file: Path, mocker: MockerFixture, capsys: pytest.CaptureFixture[str]
) -> None:
    """Passing a slug prints the article."""
    mocker.patch.object(
        BlogClient,
        "fetch_post",
        return_value=BlogArticle(slug="qbo", title="QBO Bank Rules", content="<p>Hi</p>"),
    )
    cli.blog(slug="qbo", config=config_file)
    out = capsys.readouterr().out
    assert out.startswith("QBO Bank Rules\n"), f"expected the title first, got {out!r}"
    assert "<p>Hi</p>" in out, f"expected the article body, got {out!r}"


def test_blog_api_errors_exit_with_message(
    config_file: Path, mocker: MockerFixture
) -> None:
    """A failing content API ends the command with a readable message."""
    mocker.patch.object(
        BlogClient,
        "list_posts",
        side_effect=BlogClientError("Blog API returned 502 for summit"),
    )
    with pytest.raises(SystemExit) as excinfo:
        cli.blog(config=config_file)

    message = str(excinfo.value.code)
    assert "blog request failed" in message, f"unexpected exit message {message!r}"
    assert "502" in message, f"expected the API status in {message!r}"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("true", True), ("0", False), ("false", False), ("", False)],
)
def test_main_reads_verbose_flag_from_environment(
    raw: str, expected: bool, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    """``PAGECRAFT_VERBOSE`` is parsed as a flag, so "0" stays quiet."""
    setup = mocker.patch.object(cli.log, "setup")
    mocker.patch.object(cli, "app")
    monkeypatch.setenv("PAGECRAFT_VERBOSE", raw)

    cli.main()

    setup.assert_called_once_with(verbose=expected)
