import pytest

from divconq.config import ALGORITHMS, BenchmarkConfig, load_config


def test_defaults_expand_all():
    config = BenchmarkConfig()
    assert config.algorithms == list(ALGORITHMS)
    assert config.sizes() == [10, 20, 40, 80, 160, 320, 640]


def test_single_name_and_case():
    assert BenchmarkConfig(algorithms="MergeSort").algorithms == ["mergesort"]
    assert BenchmarkConfig(algorithms=["select", "closest"]).algorithms == ["select", "closest"]


@pytest.mark.parametrize("kwargs", [
    {"algorithms": ["heapsort"]},
    {"min_size": 0},
    {"min_size": 100, "max_size": 10},
    {"growth_factor": 1},
    {"trials": 0},
    {"data_pattern": "zigzag"},
])
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        BenchmarkConfig(**kwargs)


def test_growth_factor():
    assert BenchmarkConfig(min_size=1, max_size=100, growth_factor=10).sizes() == [1, 10, 100]


def test_load_config(tmp_path):
    path = tmp_path / "bench.yaml"
    path.write_text(
        "algorithms: [quicksort, select]\n"
        "min_size: 16\n"
        "max_size: 64\n"
        "trials: 2\n"
        "data_pattern: duplicates\n"
        "seed: 7\n",
        encoding="utf-8",
    )
    config = load_config(str(path))
    assert config.algorithms == ["quicksort", "select"]
    assert config.sizes() == [16, 32, 64]
    assert config.trials == 2
    assert config.data_pattern == "duplicates"
    assert config.seed == 7


def test_load_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == BenchmarkConfig()


def test_load_config_rejects_unknown_keys(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("iterations: 5\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_config(str(path))
