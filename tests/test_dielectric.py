"""Unit tests for dielectric material.

Tests cover:
- Reflection probability at normal incidence equals r0
- Total internal reflection when leaving a dense medium at a grazing angle
- Leaving the medium below the critical angle uses the index-scaled cosine
- Index 1.0 passes rays straight through
- Attenuation is white and rays always scatter
- Material registry
"""

import numpy as np
import taichi as ti


class TestReflectProbability:
    """Tests for reflect_probability."""

    def test_normal_incidence_entering(self):
        from src.lux.materials.dielectric import reflect_probability, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect_probability(1.5, vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0))

        test_kernel()
        assert abs(result[None] - 0.04) < 1e-6

    def test_total_internal_reflection(self):
        from src.lux.materials.dielectric import reflect_probability, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            # Leaving the medium: direction and outward normal point the same way
            incident = vec3(0.9, ti.sqrt(1.0 - 0.81), 0.0)
            result[None] = reflect_probability(1.5, incident, vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert result[None] == 1.0

    def test_exiting_head_on_uses_scaled_cosine(self):
        from src.lux.materials.dielectric import reflect_probability, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect_probability(1.5, vec3(0.0, 1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        # cosine = ior * dot(d, n) = 1.5
        expected = 0.04 + 0.96 * (1.0 - 1.5) ** 5
        assert abs(result[None] - expected) < 1e-6

    def test_exiting_below_critical_angle(self):
        from src.lux.materials.dielectric import reflect_probability, vec3

        angle = np.radians(10.0)
        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(sx: ti.f32, cy: ti.f32):
            result[None] = reflect_probability(1.5, vec3(sx, cy, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel(np.sin(angle), np.cos(angle))
        cosine = 1.5 * np.cos(angle)
        expected = 0.04 + 0.96 * (1.0 - cosine) ** 5
        assert abs(result[None] - expected) < 1e-5
        assert result[None] < 1.0


class TestScatterDielectric:
    """Tests for scatter_dielectric."""

    def test_total_internal_reflection_mirrors(self, seeded_streams):
        from src.lux.materials.dielectric import scatter_dielectric, vec3

        n = seeded_streams
        directions = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                incident = vec3(0.9, ti.sqrt(1.0 - 0.81), 0.0)
                d, _, _ = scatter_dielectric(1.5, incident, vec3(0.0, 1.0, 0.0), i)
                directions[i] = d

        test_kernel()
        dirs = directions.to_numpy()
        expected = np.array([0.9, -np.sqrt(1.0 - 0.81), 0.0])
        assert np.allclose(dirs, expected, atol=1e-5)

    def test_index_one_passes_straight_through(self, seeded_streams):
        from src.lux.materials.dielectric import scatter_dielectric, vec3

        n = seeded_streams
        directions = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                d, _, _ = scatter_dielectric(1.0, vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0), i)
                directions[i] = d

        test_kernel()
        assert np.allclose(directions.to_numpy(), [0.0, 0.0, -1.0], atol=1e-6)

    def test_white_attenuation_always_scatters(self, seeded_streams):
        from src.lux.materials.dielectric import scatter_dielectric, vec3

        n = seeded_streams
        attenuations = ti.Vector.field(3, dtype=ti.f32, shape=n)
        scattered = ti.field(dtype=ti.i32, shape=n)
        reflected = ti.field(dtype=ti.i32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                d, a, s = scatter_dielectric(1.5, vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0), i)
                attenuations[i] = a
                scattered[i] = s
                reflected[i] = ti.select(d.z > 0.0, 1, 0)

        test_kernel()
        assert np.allclose(attenuations.to_numpy(), 1.0)
        assert np.all(scattered.to_numpy() == 1)
        # About 4% of rays reflect at normal incidence on glass
        fraction = reflected.to_numpy().mean()
        assert 0.01 < fraction < 0.08


class TestDielectricRegistry:
    """Tests for the dielectric material registry."""

    def test_add_and_count(self):
        from src.lux.materials.dielectric import (
            add_dielectric_material,
            dielectric_refractive_indices,
            get_dielectric_material_count,
        )

        assert add_dielectric_material() == 0
        assert add_dielectric_material(1.33) == 1
        assert get_dielectric_material_count() == 2
        assert abs(dielectric_refractive_indices[0] - 1.5) < 1e-6
        assert abs(dielectric_refractive_indices[1] - 1.33) < 1e-6
