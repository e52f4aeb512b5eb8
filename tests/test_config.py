from pathlib import Path

import pytest

from mxdev.config import DEFAULT_N_CLUSTERS, DEFAULT_SEED, INDICATOR_COLUMNS, AnalysisConfig


def test_defaults():
    config = AnalysisConfig()

    assert config.seed == DEFAULT_SEED
    assert config.n_clusters == DEFAULT_N_CLUSTERS
    assert config.pca_features == tuple(INDICATOR_COLUMNS)


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("MXDEV_SEED", "7")
    monkeypatch.setenv("MXDEV_N_CLUSTERS", "3")
    monkeypatch.setenv("MXDEV_OUTPUT_DIR", str(tmp_path))

    config = AnalysisConfig.from_env()
    assert config.seed == 7
    assert config.n_clusters == 3
    assert config.output_dir == Path(tmp_path)


def test_from_env_ignores_unset(monkeypatch):
    for name in ("MXDEV_SEED", "MXDEV_N_CLUSTERS", "MXDEV_MAX_ITER", "MXDEV_N_INIT", "MXDEV_OUTPUT_DIR"):
        monkeypatch.delenv(name, raising=False)
    assert AnalysisConfig.from_env() == AnalysisConfig()


def test_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("MXDEV_SEED", "forty-two")
    with pytest.raises(ValueError, match="MXDEV_SEED"):
        AnalysisConfig.from_env()


@pytest.mark.parametrize("field", ["n_clusters", "max_iter", "n_init"])
def test_rejects_non_positive(field):
    with pytest.raises(ValueError):
        AnalysisConfig(**{field: 0})


def test_with_overrides_skips_none():
    config = AnalysisConfig(seed=1).with_overrides(seed=None, n_clusters=4)
    assert config.seed == 1
    assert config.n_clusters == 4
