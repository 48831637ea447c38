"""Unit tests for sphere intersection.

Tests cover:
- Nearest-root selection from outside and from inside the sphere
- Misses, spheres behind the ray and the (t_min, t_max) window
- Normal orientation and front_face
- Numerical stability of the quadratic
"""

import math

import taichi as ti


def _vec(v):
    return (float(v[0]), float(v[1]), float(v[2]))


def _run_hit(origin, direction, center, radius, t_min=1e-3, t_max=1e10):
    """Intersect one ray with one sphere and return the record as Python values."""
    from tinytrace.geometry.sphere import Sphere, hit_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel():
        sphere = Sphere(center=vec3(center[0], center[1], center[2]), radius=radius)
        record = hit_sphere(
            vec3(origin[0], origin[1], origin[2]),
            vec3(direction[0], direction[1], direction[2]),
            sphere,
            t_min,
            t_max,
        )
        hit[None] = record.hit
        t_val[None] = record.t
        point[None] = record.point
        normal[None] = record.normal
        front_face[None] = record.front_face

    test_kernel()
    return {
        "hit": hit[None],
        "t": t_val[None],
        "point": _vec(point[None]),
        "normal": _vec(normal[None]),
        "front_face": front_face[None],
    }


class TestSphereBasics:
    """Tests for Sphere construction."""

    def test_make_sphere(self):
        """Test make_sphere stores center and radius."""
        from tinytrace.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(-3.0, 0.0, -16.0), 2.0)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - (-3.0)) < 1e-6
        assert abs(c[2] - (-16.0)) < 1e-6
        assert abs(radius_result[None] - 2.0) < 1e-6


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_head_on_hit_from_outside(self):
        """Test the nearer root is reported with an outward, ray-facing normal."""
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -3.0), 1.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5
        assert abs(rec["point"][2] - (-2.0)) < 1e-5
        assert abs(rec["normal"][2] - 1.0) < 1e-5
        assert rec["front_face"] == 1

    def test_miss(self):
        """Test a ray passing beside the sphere."""
        rec = _run_hit((0.0, 2.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -3.0), 1.0)
        assert rec["hit"] == 0

    def test_sphere_behind_ray(self):
        """Test a sphere behind the origin is not hit."""
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, -3.0), 1.0)
        assert rec["hit"] == 0

    def test_inside_sphere_finds_exit(self):
        """Test a ray from the center hits the far wall with an inward normal."""
        rec = _run_hit((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 1.5)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 1.5) < 1e-5
        assert abs(rec["normal"][0] - (-1.0)) < 1e-5
        assert rec["front_face"] == 0

    def test_t_min_skips_near_root(self):
        """Test a near root before t_min falls back to the far root."""
        rec = _run_hit((0.0, 0.0, -1.9995), (0.0, 0.0, -1.0), (0.0, 0.0, -3.0), 1.0, t_min=1e-3)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0005) < 1e-3
        assert rec["front_face"] == 0

    def test_t_max_rejects_far_hit(self):
        """Test hits beyond t_max are ignored."""
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -10.0), 1.0, t_max=5.0)
        assert rec["hit"] == 0

    def test_tangent_ray(self):
        """Test a ray touching the silhouette reports the tangent point."""
        rec = _run_hit((1.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 5.0) < 1e-3
        assert abs(rec["point"][0] - 1.0) < 1e-4

    def test_oblique_hit_lies_on_surface(self):
        """Test an oblique hit point lies on the sphere and the normal is unit."""
        d = 1.0 / math.sqrt(2.0)
        rec = _run_hit((4.0, 0.0, 4.0), (-d, 0.0, -d), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 1
        p = rec["point"]
        assert abs(math.sqrt(p[0] ** 2 + p[1] ** 2 + p[2] ** 2) - 1.0) < 1e-4
        n = rec["normal"]
        assert abs(math.sqrt(n[0] ** 2 + n[1] ** 2 + n[2] ** 2) - 1.0) < 1e-5
        # Normal faces the incoming ray
        assert n[0] * (-d) + n[2] * (-d) < 0.0


class TestOrientNormal:
    """Tests for turning outward normals toward the ray."""

    def test_orient_normal(self):
        """Test the normal flips only when the ray leaves the surface."""
        from tinytrace.geometry.sphere import orient_normal, vec3

        normals = ti.field(dtype=ti.math.vec3, shape=2)
        faces = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            outward = vec3(0.0, 1.0, 0.0)
            n0, f0 = orient_normal(vec3(0.0, -1.0, 0.0), outward)
            n1, f1 = orient_normal(vec3(0.0, 1.0, 0.0), outward)
            normals[0] = n0
            faces[0] = f0
            normals[1] = n1
            faces[1] = f1

        test_kernel()
        assert abs(normals[0][1] - 1.0) < 1e-6
        assert faces[0] == 1
        assert abs(normals[1][1] - (-1.0)) < 1e-6
        assert faces[1] == 0


class TestRobustQuadratic:
    """Tests for numerical robustness of the quadratic formula."""

    def test_far_away_large_sphere(self):
        """Test large distances stay within f32 precision."""
        rec = _run_hit((0.0, 0.0, 1e6), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1000.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 999000.0) < 100.0

    def test_small_sphere(self):
        """Test a tiny sphere is still hit accurately."""
        rec = _run_hit((0.0, 0.0, 1.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 0.001, t_min=1e-6)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 0.999) < 1e-4

    def test_unnormalized_direction(self):
        """Test the hit point does not depend on direction length."""
        rec = _run_hit((0.0, 0.0, 5.0), (0.0, 0.0, -2.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5
        assert abs(rec["point"][2] - 1.0) < 1e-5

    def test_near_grazing_has_no_nan(self):
        """Test a barely grazing ray either hits cleanly or misses."""
        rec = _run_hit((1.0 + 1e-7, 0.0, -5.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] in (0, 1)
        if rec["hit"] == 1:
            assert all(not math.isnan(c) for c in rec["point"])
