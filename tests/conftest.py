"""Pytest fixtures for all tests."""

import pytest

import fieldtrace as ft


@pytest.fixture(autouse=True)
def clean_config():
    """Every test starts from the default package configuration."""
    ft.reset_config()
    yield
    ft.reset_config()


@pytest.fixture
def small_params():
    """A 3x2 lattice stepped 4 times."""
    return ft.SimulationParameters(width=3, height=2, time_step=0.1, step_count=4)


@pytest.fixture
def unit_field():
    """Uniform (1, 1) field."""
    return ft.constant_field(1.0, 1.0)


@pytest.fixture
def output_path(tmp_path):
    """Output file inside a directory that does not exist yet."""
    return tmp_path / "data" / "simulation_data.txt"
