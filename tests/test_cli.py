from tsporacle.cli import main


def test_too_few_points(clean_env, capsys):
    assert main(["-n", "2"]) == 1
    assert "Minimum 3" in capsys.readouterr().out


def test_run_writes_result_file(clean_env, capsys):
    assert main(["-n", "6", "--seed", "7", "--output-dir", str(clean_env)]) == 0
    out = capsys.readouterr().out
    assert "Optimal length:" in out
    assert "Dot 5:" in out
    saved = clean_env / "tsp_result_n6_seed7.txt"
    assert saved.exists()
    assert saved.read_text().startswith("SEED: 7\n")


def test_no_save(clean_env):
    assert main(["-n", "5", "--no-save", "--strategy", "exhaustive"]) == 0
    assert not list(clean_env.glob("tsp_result_*.txt"))


def test_large_instance_declined(clean_env, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt="": "n")
    assert main(["-n", "30"]) == 0
    out = capsys.readouterr().out
    assert "WARNING" in out
    assert "Cancelled by user" in out


def test_invalid_env_config(clean_env, monkeypatch, capsys):
    monkeypatch.setenv("TSP_ORACLE_STEP", "2")
    assert main(["-n", "5", "--no-save"]) == 1
    assert "Error" in capsys.readouterr().out


def test_blank_required_env_value(clean_env, monkeypatch, capsys):
    monkeypatch.setenv("TSP_ORACLE_MAX_POINTS", "none")
    assert main(["-n", "5", "--no-save"]) == 1
    assert "TSP_ORACLE_MAX_POINTS" in capsys.readouterr().out
