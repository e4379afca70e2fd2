from cpu_sched_simulator.scripts.run_simulation import main, parse_args


def test_parse_defaults():
    args = parse_args([])
    assert args.algorithm == "all"
    assert args.cores == 1
    assert args.context_switch == 0


def test_main_runs_and_exports(tmp_path, capsys):
    main(["--n", "6", "--cores", "2", "--context-switch", "1",
          "--criterion", "context switches",
          "--plot-dir", str(tmp_path / "plots"), "--export", str(tmp_path / "out")])

    out = capsys.readouterr().out
    assert "--- Summary ---" in out
    assert "Suggested for context switches" in out
    assert (tmp_path / "plots" / "comparison.png").exists()
    assert (tmp_path / "plots" / "gantt_rr.png").exists()
    assert (tmp_path / "out" / "fcfs.json").exists()
    assert (tmp_path / "out" / "srtf_timeline.csv").exists()


def test_main_single_algorithm(capsys):
    main(["--algorithm", "SJF", "--n", "4"])
    out = capsys.readouterr().out
    assert "Shortest Job First" in out
