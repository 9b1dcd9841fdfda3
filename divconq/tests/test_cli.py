import pytest

from divconq.cli import build_parser, main, run_correctness_tests, run_demo


@pytest.fixture(autouse=True)
def _logging(restore_logging):
    yield


def test_demo(capsys):
    assert main(["--demo"]) == 0
    out = capsys.readouterr().out
    assert "Original array: [64, 34, 25, 12, 22, 11, 90]" in out
    assert "After MergeSort: [11, 12, 22, 25, 34, 64, 90]" in out
    assert "After QuickSort: [11, 12, 22, 25, 34, 64, 90]" in out
    assert "Median (3rd element): 25" in out
    assert "Distance: 1.4142" in out


def test_run_demo_directly(capsys):
    run_demo()
    assert "Closest Pair Demo:" in capsys.readouterr().out


def test_verify(capsys):
    assert main(["--verify", "--seed", "5"]) == 0
    out = capsys.readouterr().out
    assert "MergeSort: passed 7/7" in out
    assert "ClosestPair vs brute force: passed 5/5" in out


def test_correctness_tests_unseeded(capsys):
    assert run_correctness_tests() is True


def test_benchmark_run(tmp_path, capsys):
    code = main(["mergesort", "40", "out.csv", "--results-dir", str(tmp_path), "--trials", "1", "--seed", "3"])
    assert code == 0
    lines = (tmp_path / "out.csv").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 4
    assert [line.split(",")[1] for line in lines[1:]] == ["10", "20", "40"]
    out = capsys.readouterr().out
    assert "MergeSort: n=10" in out
    assert "Results exported to" in out


def test_benchmark_from_config(tmp_path):
    config = tmp_path / "bench.yaml"
    config.write_text(
        "algorithms: [select, closest]\n"
        "min_size: 8\n"
        "max_size: 32\n"
        "trials: 1\n"
        "seed: 11\n"
        f"results_dir: {tmp_path.as_posix()}\n",
        encoding="utf-8",
    )
    assert main(["--config", str(config), "--pattern", "duplicates"]) == 0
    assert (tmp_path / "metrics.csv").exists()


def test_missing_arguments():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2


def test_unknown_algorithm_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["heapsort", "100"])


def test_log_level_is_case_insensitive(capsys):
    assert main(["--demo", "--log-level", "debug"]) == 0


def test_unknown_log_level_rejected(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--demo", "--log-level", "chatty"])
    assert excinfo.value.code == 2
    assert "--log-level" in capsys.readouterr().err
