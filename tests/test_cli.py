import json

from typer.testing import CliRunner

from iEdit.application.dtos import PlacementMetadata
from iEdit.cli import app
from iEdit.io.placement import build_markup

runner = CliRunner()


def test_url_commit_example():
    result = runner.invoke(
        app,
        [
            "url",
            "abc",
            "--host",
            "https://imbo.example.com",
            "--user",
            "editor",
            "-t",
            "modulate:b=120,s=80,h=100",
            "-t",
            "contrast:sharpen=10",
            "--crop",
            "10,10,40,130",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == (
        "https://imbo.example.com/users/editor/images/abc.jpg"
        "?t[]=maxSize:width=552"
        "&t[]=modulate:b=120,s=80"
        "&t[]=contrast:sharpen=10"
        "&t[]=crop:x=10,y=10,width=30,height=120"
    )


def test_url_preview_bounds():
    result = runner.invoke(app, ["url", "abc", "--host", "https://imbo.example.com", "--preview"])

    assert result.exit_code == 0, result.output
    assert "maxSize:width=924,height=693" in result.output


def test_url_without_host_fails():
    result = runner.invoke(app, ["url", "abc"])

    assert result.exit_code == 1


def test_url_reads_settings_file(tmp_path):
    settings = tmp_path / "settings.json"
    settings.write_text(
        json.dumps({"image_service": {"host": "https://cdn.example.com"}, "editor": {"output_max_width": 800}}),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["url", "abc", "--settings", str(settings)])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "https://cdn.example.com/images/abc.jpg?t[]=maxSize:width=800"


def test_diff_command():
    result = runner.invoke(app, ["diff", "-t", "modulate:b=120,s=80,h=100", "-t", "rotate:angle=-90"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "modulate": {"brightness": 120, "saturation": 80},
        "rotate": {"angle": 270},
    }


def test_parse_command():
    result = runner.invoke(app, ["parse", "modulate:b=120", "border:color"])

    assert result.exit_code == 0, result.output
    assert "modulate" in result.output
    assert "border" in result.output


def test_inspect_command(tmp_path):
    markup = tmp_path / "element.html"
    markup.write_text(
        build_markup("https://x/images/abc.jpg", PlacementMetadata(image_identifier="abc")),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["inspect", str(markup)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["imageIdentifier"] == "abc"


def test_inspect_invalid_metadata(tmp_path):
    markup = tmp_path / "element.html"
    markup.write_text('<div><img data-image-identifier="" /></div>', encoding="utf-8")

    result = runner.invoke(app, ["inspect", str(markup)])

    assert result.exit_code == 1
