"""Unit tests for the checkerboard ground plane.

Tests cover:
- Hits from above and below, parallel rays, the (t_min, t_max) window
- Checkerboard color parity, including negative coordinates
"""

import taichi as ti


class TestHitGroundPlane:
    """Tests for ray-plane intersection."""

    def test_hit_from_above(self):
        """Test a downward ray hits the plane with an upward normal."""
        from tinytrace.geometry.plane import GroundPlane, hit_ground_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = GroundPlane(
                height=-4.0,
                checker_size=2.0,
                color_a=vec3(0.3, 0.3, 0.3),
                color_b=vec3(0.3, 0.2, 0.1),
            )
            rec = hit_ground_plane(vec3(0.0, 0.0, 0.0), vec3(0.0, -1.0, 0.0), plane, 1e-3, 1e10)
            hit[None] = rec.hit
            t_val[None] = rec.t
            normal[None] = rec.normal
            front_face[None] = rec.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 4.0) < 1e-5
        assert abs(normal[None][1] - 1.0) < 1e-6
        assert front_face[None] == 1

    def test_hit_from_below(self):
        """Test an upward ray from under the plane sees a downward normal."""
        from tinytrace.geometry.plane import GroundPlane, hit_ground_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = GroundPlane(
                height=-4.0,
                checker_size=2.0,
                color_a=vec3(0.3, 0.3, 0.3),
                color_b=vec3(0.3, 0.2, 0.1),
            )
            rec = hit_ground_plane(vec3(0.0, -10.0, 0.0), vec3(0.0, 1.0, 0.0), plane, 1e-3, 1e10)
            hit[None] = rec.hit
            normal[None] = rec.normal
            front_face[None] = rec.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(normal[None][1] - (-1.0)) < 1e-6
        assert front_face[None] == 0

    def test_parallel_and_receding_rays_miss(self):
        """Test near-parallel rays and rays pointing away never hit."""
        from tinytrace.geometry.plane import GroundPlane, hit_ground_plane, vec3

        hits = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            plane = GroundPlane(
                height=-4.0,
                checker_size=2.0,
                color_a=vec3(0.3, 0.3, 0.3),
                color_b=vec3(0.3, 0.2, 0.1),
            )
            origin = vec3(0.0, 0.0, 0.0)
            hits[0] = hit_ground_plane(origin, vec3(1.0, 0.0, 0.0), plane, 1e-3, 1e10).hit
            hits[1] = hit_ground_plane(origin, vec3(1.0, -1e-4, 0.0), plane, 1e-3, 1e10).hit
            hits[2] = hit_ground_plane(origin, vec3(0.0, 1.0, 0.0), plane, 1e-3, 1e10).hit

        test_kernel()
        assert hits[0] == 0
        assert hits[1] == 0
        assert hits[2] == 0

    def test_t_max_bounds_hit(self):
        """Test a plane beyond t_max is not reported."""
        from tinytrace.geometry.plane import GroundPlane, hit_ground_plane, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            plane = GroundPlane(
                height=-4.0,
                checker_size=2.0,
                color_a=vec3(0.3, 0.3, 0.3),
                color_b=vec3(0.3, 0.2, 0.1),
            )
            hit[None] = hit_ground_plane(
                vec3(0.0, 0.0, 0.0), vec3(0.0, -1.0, 0.0), plane, 1e-3, 3.0
            ).hit

        test_kernel()
        assert hit[None] == 0


class TestCheckerboard:
    """Tests for the procedural checkerboard color."""

    def test_adjacent_cells_alternate(self):
        """Test neighbouring cells differ and diagonal cells match."""
        from tinytrace.geometry.plane import GroundPlane, checkerboard_color, vec3

        colors = ti.field(dtype=ti.math.vec3, shape=4)

        @ti.kernel
        def test_kernel():
            plane = GroundPlane(
                height=-4.0,
                checker_size=2.0,
                color_a=vec3(0.3, 0.3, 0.3),
                color_b=vec3(0.3, 0.2, 0.1),
            )
            colors[0] = checkerboard_color(plane, vec3(0.5, -4.0, 0.5))  # cell (0, 0)
            colors[1] = checkerboard_color(plane, vec3(2.5, -4.0, 0.5))  # cell (1, 0)
            colors[2] = checkerboard_color(plane, vec3(2.5, -4.0, 2.5))  # cell (1, 1)
            colors[3] = checkerboard_color(plane, vec3(-0.5, -4.0, 0.5))  # cell (-1, 0)

        test_kernel()
        assert abs(colors[0][1] - 0.3) < 1e-6
        assert abs(colors[1][1] - 0.2) < 1e-6
        assert abs(colors[2][1] - 0.3) < 1e-6
        assert abs(colors[3][1] - 0.2) < 1e-6
