import json
import os
import subprocess
import sys

from click.testing import CliRunner

from tfgraph.cli import scan

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def test_module_execution():
    """Test that 'python -m tfgraph' works."""
    result = subprocess.run(
        [sys.executable, "-m", "tfgraph", "--help"],
        capture_output=True,
        text=True
    )
    assert result.returncode == 0
    assert "tfgraph" in result.stdout


def test_json_to_stdout():
    runner = CliRunner()
    result = runner.invoke(scan, [os.path.join(FIXTURES, "network.tf")])
    assert result.exit_code == 0
    payload = json.loads(result.stdout[result.stdout.index("{"):])
    assert set(payload) == {"resources", "dependencies"}
    assert payload["dependencies"][0]["source"] == "aws_subnet.public"
    assert payload["dependencies"][0]["references"][0]["sourceProperty"] == "vpc_id"
    assert payload["resources"][0]["origin"]["line"] == 0


def test_markdown_encoding_and_newline(tmp_path):
    """Markdown is written as UTF-8 with LF newlines."""
    output_file = tmp_path / "diagram.md"
    result = CliRunner().invoke(scan, [FIXTURES, "--format", "markdown", "--output", str(output_file)])
    assert result.exit_code == 0

    with open(output_file, "rb") as f:
        content = f.read()
    assert b"\r\n" not in content
    text = content.decode("utf-8")
    assert "```mermaid" in text
    assert "aws_subnet_public -->|id| aws_vpc_main" in text


def test_html_report(tmp_path):
    output_file = tmp_path / "diagram.html"
    result = CliRunner().invoke(scan, [FIXTURES, "--format", "html", "-o", str(output_file)])
    assert result.exit_code == 0
    html = output_file.read_text(encoding="utf-8")
    assert "<!DOCTYPE html>" in html
    assert "aws_db_instance.primary" in html


def test_no_files_exit_code(tmp_path):
    result = CliRunner().invoke(scan, [str(tmp_path)])
    assert result.exit_code == 2


def test_bad_config_exit_code(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("categories:\n  aws_vpc: nope\n")
    result = CliRunner().invoke(scan, [FIXTURES, "--config", str(cfg)])
    assert result.exit_code == 2


def test_config_overrides_category(tmp_path):
    cfg = tmp_path / "tfgraph.yaml"
    cfg.write_text("categories:\n  aws_vpc: security\n")
    result = CliRunner().invoke(scan, [os.path.join(FIXTURES, "network.tf"), "--config", str(cfg)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout[result.stdout.index("{"):])
    vpc = next(r for r in payload["resources"] if r["kind"] == "aws_vpc")
    assert vpc["category"] == "security"


def test_summary_only():
    result = CliRunner().invoke(scan, [FIXTURES, "--summary"])
    assert result.exit_code == 0
    assert "{" not in result.stdout
