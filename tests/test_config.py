from krill.config import EditorConfig, load_config, parse_config


def test_defaults():
    config = EditorConfig()
    assert config.tab_stop == 4
    assert config.quit_times == 2
    assert config.message_timeout == 5.0
    assert config.read_timeout == 0.1
    assert config.log_file == "krill.log"


def test_parse_values():
    config = parse_config(
        "# krill settings\n"
        "\n"
        "tab_stop = 8\n"
        "quit_times=3\n"
        "message_timeout=2.5\n"
        "log_file=\n"
    )
    assert config.tab_stop == 8
    assert config.quit_times == 3
    assert config.message_timeout == 2.5
    assert config.log_file == ""


def test_bad_lines_are_skipped(isolated_log):
    config = parse_config(
        "tab_stop=zero\n"
        "tab_stop=0\n"
        "colour=blue\n"
        "just some words\n"
        "quit_times=1\n"
    )
    assert config.tab_stop == 4
    assert config.quit_times == 1
    logged = isolated_log.read_text()
    assert "bad value for tab_stop" in logged
    assert "unknown setting 'colour'" in logged
    assert "expected key=value" in logged


def test_load_missing_file_gives_defaults(tmp_path):
    assert load_config(str(tmp_path / "nope.conf")) == EditorConfig()


def test_load_file(tmp_path):
    path = tmp_path / "krill.conf"
    path.write_text("tab_stop=2\n", encoding="utf-8")
    assert load_config(str(path)).tab_stop == 2
