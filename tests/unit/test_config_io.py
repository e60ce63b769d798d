import io
from pathlib import Path

import pytest

from stack_mermaid.catalog import StackKnowledge
from stack_mermaid.cli import main
from stack_mermaid.config import StackConfig, build_config
from stack_mermaid.constants import TITLE_DEFAULT
from stack_mermaid.frames import DEFAULT_IGNORES, IgnoreRule
from stack_mermaid.io import load_config, read_stack_text


def write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_no_config_means_defaults():
    cfg = load_config(None)
    assert cfg == StackConfig()
    assert cfg.ignore_rules == DEFAULT_IGNORES
    assert cfg.direction == "LR"
    assert cfg.title == TITLE_DEFAULT


def test_empty_file_means_defaults(tmp_path):
    assert load_config(write(tmp_path, "c.yaml", "")) == StackConfig()


def test_extra_ignores_are_appended(tmp_path):
    path = write(
        tmp_path,
        "c.yaml",
        "direction: tb\n"
        "ignore:\n"
        "  - pattern: '^UnityEngine\\.'\n"
        "    intent: engine frames\n"
        "  - '^Mono\\.'\n",
    )
    cfg = load_config(path)
    assert cfg.direction == "TB"
    assert cfg.ignore_rules[: len(DEFAULT_IGNORES)] == DEFAULT_IGNORES
    assert cfg.ignore_rules[len(DEFAULT_IGNORES):] == (
        IgnoreRule(r"^UnityEngine\.", "engine frames"),
        IgnoreRule(r"^Mono\.", ""),
    )


def test_defaults_can_be_dropped():
    cfg = build_config({"include_default_ignores": False, "ignore": ["Noise"]})
    assert cfg.ignore_rules == (IgnoreRule("Noise"),)


def test_unquoted_title_with_colon_is_sanitized(tmp_path, capsys):
    path = write(tmp_path, "c.yaml", "title: Lobby join: player spawn\n")
    cfg = load_config(path)
    assert cfg.title == "Lobby join: player spawn"
    assert "after quoting 1 line(s)" in capsys.readouterr().err


def test_top_level_must_be_mapping(tmp_path):
    with pytest.raises(TypeError, match="must be a mapping"):
        load_config(write(tmp_path, "c.yaml", "- a\n- b\n"))


def test_bad_yaml(tmp_path):
    with pytest.raises(ValueError, match="Failed to parse YAML"):
        load_config(write(tmp_path, "c.yaml", "ignore: [unclosed\n"))


def test_bad_regex(tmp_path):
    with pytest.raises(ValueError, match=r"ignore\[0\] is not a valid regex"):
        load_config(write(tmp_path, "c.yaml", "ignore:\n  - '(unbalanced'\n"))


def test_bad_direction():
    with pytest.raises(ValueError, match="unknown direction"):
        build_config({"direction": "sideways"})


def test_bad_ignore_item():
    with pytest.raises(ValueError, match="must be a string or a mapping"):
        build_config({"ignore": [{"intent": "no pattern"}]})


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_read_stack_text_from_file(tmp_path):
    path = write(tmp_path, "trace.txt", "ns.A.b ()\n")
    assert read_stack_text(path) == "ns.A.b ()\n"


def test_read_stack_text_from_stdin():
    assert read_stack_text(None, stdin=io.StringIO("ns.A.b ()")) == "ns.A.b ()"
    assert read_stack_text(Path("-"), stdin=io.StringIO("x")) == "x"


def test_inline_flag_pattern_works_alongside_defaults(tmp_path):
    cfg = load_config(write(tmp_path, "c.yaml", "ignore:\n  - '(?i)^unityengine'\n"))
    knowledge = StackKnowledge(cfg)
    knowledge.process_stack("UnityEngine.Debug.Log (object message)\nns.A.b ()")

    assert knowledge.ignored_count == 1
    assert [c.name for c in knowledge.classes] == ["A"]


def test_cli_accepts_inline_flag_pattern(tmp_path, capsys):
    cfg = write(tmp_path, "c.yaml", "ignore:\n  - '(?i)^unityengine'\n")
    trace = write(tmp_path, "trace.txt", "UnityEngine.Debug.Log (object message)\nns.A.b ()\n")

    main([str(trace), "--config", str(cfg), "--strict"])

    assert capsys.readouterr().out.splitlines()[-2:] == ["  A.b", "```"]


@pytest.mark.parametrize("value", ["'false'", "0", "no-thanks"])
def test_include_default_ignores_must_be_bool(tmp_path, value):
    path = write(tmp_path, "c.yaml", f"include_default_ignores: {value}\n")
    with pytest.raises(ValueError, match="`include_default_ignores` must be true or false"):
        load_config(path)


def test_include_default_ignores_false(tmp_path):
    cfg = load_config(write(tmp_path, "c.yaml", "include_default_ignores: false\n"))
    assert cfg.ignore_rules == ()
