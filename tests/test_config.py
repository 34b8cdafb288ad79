import pytest

import config
from config import DEFAULT_KERNEL_SIZE, DEFAULT_TILE_SIZE, PipelineConfig
from errors import PreconditionError


def test_defaults():
    cfg = PipelineConfig().validate()
    assert cfg.kernel_size == DEFAULT_KERNEL_SIZE == 20
    assert cfg.tile_size == DEFAULT_TILE_SIZE == 64
    assert cfg.pool_sizes() == (config.default_workers(), config.default_workers())


def test_default_workers_is_positive():
    assert config.default_workers() >= 1


def test_pool_sizes_per_stage():
    assert PipelineConfig(blur_workers=3, invert_workers=5).pool_sizes() == (3, 5)
    assert PipelineConfig(blur_workers=0, invert_workers=1).pool_sizes() == (1, 1)


@pytest.mark.parametrize("kwargs", [
    {"kernel_size": 0},
    {"kernel_size": -1},
    {"kernel_size": 2.5},
    {"tile_size": 0},
    {"tile_size": "64"},
    {"blur_workers": -2},
    {"invert_workers": 1.0},
    {"tile_size": False},
])
def test_validate_rejects(kwargs):
    with pytest.raises(PreconditionError):
        PipelineConfig(**kwargs).validate()


def test_from_env_overrides():
    cfg = PipelineConfig.from_env({
        "FILTER_KERNEL_SIZE": "3",
        "FILTER_TILE_SIZE": "16",
        "FILTER_WORKERS": "4",
        "FILTER_INVERT_WORKERS": "2",
    })
    assert cfg == PipelineConfig(kernel_size=3, tile_size=16, blur_workers=4, invert_workers=2)


def test_from_env_empty_uses_defaults():
    assert PipelineConfig.from_env({"FILTER_TILE_SIZE": ""}) == PipelineConfig()


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("FILTER_KERNEL_SIZE", "7")
    assert PipelineConfig.from_env().kernel_size == 7


@pytest.mark.parametrize("env", [
    {"FILTER_KERNEL_SIZE": "abc"},
    {"FILTER_TILE_SIZE": "0"},
    {"FILTER_BLUR_WORKERS": "-1"},
])
def test_from_env_invalid(env):
    with pytest.raises(PreconditionError):
        PipelineConfig.from_env(env)
