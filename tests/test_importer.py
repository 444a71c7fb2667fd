# tests/test_importer.py
import pytest

from devsecops_tutor.importer import parse_markdown_glossary, read_glossary_file


def test_read_json_glossary(tmp_path):
    f = tmp_path / "glossary.json"
    f.write_text('{"SAST": "Static testing", "SBOM": "Bill of materials"}')
    assert read_glossary_file(str(f)) == {"SAST": "Static testing", "SBOM": "Bill of materials"}


def test_read_json_glossary_wrapped(tmp_path):
    f = tmp_path / "glossary.json"
    f.write_text('{"glossary": {"IaC": "Infrastructure as Code"}}')
    assert read_glossary_file(str(f)) == {"IaC": "Infrastructure as Code"}


def test_read_yaml_glossary(tmp_path):
    f = tmp_path / "glossary.yaml"
    f.write_text("CI/CD: Continuous integration and delivery\nRASP: Runtime self-protection\n")
    glossary = read_glossary_file(str(f))
    assert glossary["CI/CD"] == "Continuous integration and delivery"
    assert glossary["RASP"] == "Runtime self-protection"


def test_read_markdown_glossary(tmp_path):
    f = tmp_path / "glossary.md"
    f.write_text(
        "# DevSecOps terms\n\n"
        "- **SAST**: Static application security testing.\n"
        "**Shift-Left** - Moving security earlier.\n"
        "IaC: Infrastructure as Code.\n"
    )
    glossary = read_glossary_file(str(f))
    assert glossary == {
        "SAST": "Static application security testing.",
        "Shift-Left": "Moving security earlier.",
        "IaC": "Infrastructure as Code.",
    }


def test_parse_markdown_skips_prose():
    assert parse_markdown_glossary("Just a sentence without a definition") == {}


def test_read_list_json_rejected(tmp_path):
    f = tmp_path / "glossary.json"
    f.write_text('["SAST", "DAST"]')
    with pytest.raises(ValueError):
        read_glossary_file(str(f))


def test_read_invalid_yaml_raises_value_error(tmp_path):
    f = tmp_path / "glossary.yml"
    f.write_text("SAST: [unclosed")
    with pytest.raises(ValueError):
        read_glossary_file(str(f))
