from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from appcache.cli import cli


def _project(tmp_path: Path, prior: str | None = None) -> Path:
    www = tmp_path / "www"
    www.mkdir()
    (www / "index.html").write_text('<script src="app.js"></script>', encoding="utf-8")
    (www / "app.js").write_text("", encoding="utf-8")
    if prior is not None:
        (www / "manifest.appcache").write_text(prior, encoding="utf-8")
    config = tmp_path / "appcache.yaml"
    config.write_text(
        "\n".join(
            [
                "options:",
                "  base_path: www",
                "targets:",
                "  main:",
                "    dest: www/manifest.appcache",
                "    cache:",
                "      literals: [index.html]",
                "      pageslinks: [index.html]",
                "    network: ['*']",
                "  extra:",
                "    dest: www/extra.appcache",
                "    cache: ['*.js']",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return config


def test_build_writes_every_target(tmp_path: Path) -> None:
    config = _project(tmp_path)

    result = CliRunner().invoke(cli, ["build", str(config)])

    assert result.exit_code == 0, result.output
    assert 'AppCache manifest "manifest.appcache" created.' in result.output
    assert 'AppCache manifest "extra.appcache" created.' in result.output
    text = (tmp_path / "www" / "manifest.appcache").read_text(encoding="utf-8")
    assert text.startswith("CACHE MANIFEST\n# rev: 0 ")
    assert "CACHE:\napp.js\nindex.html\nNETWORK:\n*\n" in text


def test_build_selected_target_only(tmp_path: Path) -> None:
    config = _project(tmp_path)

    result = CliRunner().invoke(cli, ["build", str(config), "--target", "extra"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "www" / "extra.appcache").is_file()
    assert not (tmp_path / "www" / "manifest.appcache").exists()


def test_build_unknown_target_is_a_usage_error(tmp_path: Path) -> None:
    config = _project(tmp_path)

    result = CliRunner().invoke(cli, ["build", str(config), "-t", "nope"])

    assert result.exit_code == 2
    assert "nope" in result.output


def test_build_reports_failed_target(tmp_path: Path) -> None:
    config = _project(tmp_path, prior="NOT A MANIFEST")

    result = CliRunner().invoke(cli, ["build", str(config)])

    assert result.exit_code == 1
    assert "target main failed (format)" in result.output
    assert 'AppCache manifest "extra.appcache" created.' in result.output
    prior = (tmp_path / "www" / "manifest.appcache").read_text(encoding="utf-8")
    assert prior == "NOT A MANIFEST"

def test_build_names_target_with_undecodable_manifest(tmp_path: Path) -> None:
    config = _project(tmp_path)
    dest = tmp_path / "www" / "manifest.appcache"
    dest.write_bytes(b"CACHE MANIFEST\n\xff\xfe\n")

    result = CliRunner().invoke(cli, ["build", str(config)])

    assert result.exit_code == 1
    assert "target main failed (format)" in result.output
    assert 'AppCache manifest "extra.appcache" created.' in result.output



def test_build_missing_config(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["build", str(tmp_path / "absent.yaml")])

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_build_invalid_config(tmp_path: Path) -> None:
    config = tmp_path / "appcache.yaml"
    config.write_text("targets:\n  main:\n    cache: a.js\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["build", str(config)])

    assert result.exit_code == 1
    assert "dest" in result.output


def test_show_prints_model_and_text(tmp_path: Path) -> None:
    manifest = tmp_path / "site.appcache"
    manifest.write_text(
        "CACHE MANIFEST\n# rev: 3\nindex.html\nindex.html\nNETWORK:\n*\n",
        encoding="utf-8",
    )
    runner = CliRunner()

    as_yaml = runner.invoke(cli, ["show", str(manifest)])
    as_text = runner.invoke(cli, ["show", str(manifest), "--format", "text"])

    assert as_yaml.exit_code == 0, as_yaml.output
    assert "revision: 3" in as_yaml.output
    assert "- index.html" in as_yaml.output
    assert as_text.exit_code == 0, as_text.output
    assert as_text.output == "CACHE MANIFEST\n# rev: 3\nCACHE:\nindex.html\nNETWORK:\n*\n"


def test_show_rejects_malformed_manifest(tmp_path: Path) -> None:
    manifest = tmp_path / "bad.appcache"
    manifest.write_text("NOT A MANIFEST\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["show", str(manifest)])

    assert result.exit_code == 1
    assert "CACHE MANIFEST" in result.output


def test_verbose_build_logs_progress(tmp_path: Path) -> None:
    config = _project(tmp_path)

    result = CliRunner().invoke(cli, ["--verbose", "build", str(config), "-j", "2"])

    assert result.exit_code == 0, result.output
    assert "[build] main: wrote revision 0" in result.output
