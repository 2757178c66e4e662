import json

import pytest

from app.modules.generation import cli
from app.modules.generation.errors import InvalidPayload
from app.modules.generation.prompts import NO_WRAPPER_RULE
from tests.fixtures.fake_model import FakeModelClient
from tests.fixtures.sample_data import FENCED_FLASHCARDS_TEXT

pytestmark = pytest.mark.unit


def test_prompt_command_prints_the_instruction(capsys):
    code = cli.main(["prompt", "quiz", "--source", "Photosynthesis", "--num", "3"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Photosynthesis" in out
    assert "3 questions" in out
    assert NO_WRAPPER_RULE in out


def test_prompt_command_reads_source_file(tmp_path, capsys):
    source = tmp_path / "notes.txt"
    source.write_text("Osmosis moves water.", encoding="utf-8")
    assert cli.main(["prompt", "flashcard-set", "--source-file", str(source)]) == 0
    assert "Osmosis moves water." in capsys.readouterr().out


def test_prompt_command_rejects_out_of_range_count():
    with pytest.raises(InvalidPayload):
        cli.main(["prompt", "quiz", "--source", "x", "--num", "999"])


def test_source_is_required():
    with pytest.raises(SystemExit):
        cli.main(["prompt", "quiz"])


def test_generate_command_prints_content(monkeypatch, capsys):
    monkeypatch.setattr(
        cli, "PydanticAIModelClient", lambda: FakeModelClient(FENCED_FLASHCARDS_TEXT)
    )
    assert cli.main(["generate", "flashcard-set", "--source", "Cells", "--num", "2"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert len(payload["flashcards"]) == 2


def test_generate_command_reports_errors_as_json(monkeypatch, capsys):
    monkeypatch.setattr(cli, "PydanticAIModelClient", lambda: FakeModelClient("no json"))
    assert cli.main(["generate", "quiz", "--source", "Cells"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["error"]["category"] == "malformed-model-output"
