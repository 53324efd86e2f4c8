"""
Configuration validation and family parsing.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orbitcount.config import Config, ConfigError, parse_family, quota_range, validate_config
from orbitcount.kernel import Grid, Ring, SymmetryFamily as F


@pytest.mark.parametrize("config", [
    Config(Ring(2), 2, F.NONE),
    Config(Ring(10), 8, F.ROTATE_AND_FLIP),
    Config(Grid(1, 1), 2, F.ROTATE),
    Config(Grid(8, 8), 2, F.ROTATE_AND_FLIP),
    Config(Ring(6), 3, F.ROTATE, quota=2),
    Config(Ring(6), 3, F.ROTATE, quota=6),
])
def test_valid_configs_pass_through(config):
    assert validate_config(config) is config


@pytest.mark.parametrize("config", [
    Config(Ring(1), 2, F.ROTATE),
    Config(Ring(11), 2, F.ROTATE),
    Config(Ring(5), 1, F.ROTATE),
    Config(Ring(5), 9, F.ROTATE),
    Config(Grid(0, 3), 2, F.ROTATE),
    Config(Grid(3, 9), 2, F.ROTATE),
    Config(Grid(8, 8), 3, F.ROTATE),
    Config(Ring(6), 3, F.ROTATE, quota=1),
    Config(Ring(6), 3, F.ROTATE, quota=7),
    Config(Ring(6), 3, "rotate"),
    Config("hexagon", 3, F.ROTATE),
])
def test_invalid_configs_rejected(config):
    with pytest.raises(ConfigError):
        validate_config(config)


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


@pytest.mark.parametrize("shape, n_colours, expected", [
    (Ring(6), 3, (2, 6)),
    (Ring(7), 3, (3, 7)),
    (Ring(2), 8, (1, 2)),
    (Grid(3, 3), 2, (5, 9)),
])
def test_quota_range(shape, n_colours, expected):
    assert quota_range(shape, n_colours) == expected


def test_colour_limit():
    assert Config(Ring(6), 3, F.ROTATE).colour_limit == 6
    assert Config(Ring(6), 3, F.ROTATE, quota=2).colour_limit == 2
    assert Config(Grid(3, 2), 2, F.NONE).positions == 6


@pytest.mark.parametrize("text, family", [
    ("none", F.NONE),
    ("No-Transforms", F.NONE),
    ("rotate", F.ROTATE),
    (" rotations ", F.ROTATE),
    ("rotate+flip", F.ROTATE_AND_FLIP),
    ("rotate-and-flip", F.ROTATE_AND_FLIP),
    ("DIHEDRAL", F.ROTATE_AND_FLIP),
])
def test_parse_family(text, family):
    assert parse_family(text) is family


def test_parse_family_rejects_unknown():
    with pytest.raises(ValueError):
        parse_family("mirror")
