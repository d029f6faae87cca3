"""Pytest configuration for lux tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear uploaded scene, materials and render target around each test."""
    # Import here so the field-owning modules load after ti.init
    from src.lux.core.integrator import _render_target_initialized, clear_render_target
    from src.lux.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_render_target()
        _render_target_initialized[None] = 0

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def seeded_streams():
    """Seed a small block of random streams for kernel-level tests."""
    from src.lux.core.sampler import seed_streams

    seed_streams(seed=1234, count=1024)
    return 1024
