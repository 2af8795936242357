import math
import unittest
import logging

from skidryer.dimensions import REFERENCE_PARAMS, DesignParams
from skidryer.kinematics import (
    Linkage,
    RotationAxis,
    frame_times,
    hinge_placements,
    horizontal_displacement,
    opening_angle_at,
    pose_table,
    rope_states,
    solve_pose,
    upper_base_offset,
    validate_opening_angle,
    vertical_separation,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("TestKinematics")


class TestPlacementFormulas(unittest.TestCase):
    def setUp(self):
        # W=60, T=2, D=300
        self.params = REFERENCE_PARAMS
        self.linkage = Linkage.from_params(self.params)

    def test_01_rest_pose(self):
        """At theta=0 the planes are D + 2T apart with no horizontal travel."""
        self.assertAlmostEqual(vertical_separation(self.linkage, 0.0), 304.0, places=9)
        self.assertAlmostEqual(horizontal_displacement(self.linkage, 0.0), 0.0, places=9)

    def test_02_closed_pose(self):
        """At theta=90 the leg lies on its side."""
        self.assertAlmostEqual(vertical_separation(self.linkage, 90.0), 2 * 2 + 60, places=9)
        self.assertAlmostEqual(horizontal_displacement(self.linkage, 90.0), 60 + 300, places=9)

    def test_03_linkage_constants(self):
        self.assertAlmostEqual(self.linkage.length, math.hypot(60, 300))
        self.assertAlmostEqual(math.degrees(self.linkage.phi), 78.69006752597979)
        self.assertAlmostEqual(self.linkage.peak_angle, 90 - 78.69006752597979)

    def test_04_peak_separation(self):
        """Separation rises to 2T + L at the peak angle, then falls."""
        peak = self.linkage.peak_angle
        f_peak = vertical_separation(self.linkage, peak)
        self.assertAlmostEqual(f_peak, 4 + self.linkage.length)

        thetas = [i * 0.5 for i in range(181)]
        rising = [t for t in thetas if t <= peak]
        falling = [t for t in thetas if t >= peak]
        for a, b in zip(rising, rising[1:]):
            self.assertLessEqual(vertical_separation(self.linkage, a),
                                 vertical_separation(self.linkage, b))
        for a, b in zip(falling, falling[1:]):
            self.assertGreaterEqual(vertical_separation(self.linkage, a),
                                    vertical_separation(self.linkage, b))

    def test_05_displacement_increasing(self):
        thetas = [i * 0.5 for i in range(181)]
        values = [horizontal_displacement(self.linkage, t) for t in thetas]
        for a, b in zip(values, values[1:]):
            self.assertLess(a, b)

    def test_06_bounded_derivatives(self):
        """Both formulas change by at most L per radian, boundaries included."""
        step = 0.01
        bound = self.linkage.length * math.radians(step) + 1e-9
        for i in range(int(90 / step)):
            theta = i * step
            for func in (vertical_separation, horizontal_displacement):
                delta = abs(func(self.linkage, theta + step) - func(self.linkage, theta))
                self.assertLessEqual(delta, bound)

    def test_07_offset_follows_axis(self):
        """One formula serves both axes; only the travel direction differs."""
        for theta in (0.0, 17.0, 45.0, 90.0):
            f = vertical_separation(self.linkage, theta)
            g = horizontal_displacement(self.linkage, theta)
            ox, oy, oz = upper_base_offset(self.params, self.linkage, theta, RotationAxis.Y)
            self.assertAlmostEqual(ox, -g)
            self.assertEqual(oy, 0.0)
            self.assertAlmostEqual(oz, self.params.plane_thickness + f)

            ox, oy, oz = upper_base_offset(self.params, self.linkage, theta, RotationAxis.X)
            self.assertEqual(ox, 0.0)
            self.assertAlmostEqual(oy, -g)
            self.assertAlmostEqual(oz, self.params.plane_thickness + f)


class TestOpeningAngleValidation(unittest.TestCase):
    def test_01_boundaries_accepted(self):
        for theta in (0, 0.0, 45.5, 90, 90.0):
            ok, errors = validate_opening_angle(theta)
            self.assertTrue(ok, f"{theta} rejected: {errors}")
            self.assertEqual(errors, [])

    def test_02_out_of_range_rejected_identically(self):
        messages = []
        for theta in (-1, 91, -0.001, 90.001, 360):
            ok, errors = validate_opening_angle(theta)
            self.assertFalse(ok)
            self.assertEqual(len(errors), 1)
            messages.append(errors[0].replace(str(theta), "<theta>"))
        self.assertEqual(len(set(messages)), 1, messages)

    def test_03_solve_pose_logs_and_returns_none(self):
        for theta in (-1, 91):
            with self.assertLogs("skidryer.kinematics", level="ERROR") as cm:
                pose = solve_pose(REFERENCE_PARAMS, theta)
            self.assertIsNone(pose)
            self.assertIn("out of range", cm.output[0])

    def test_04_solve_pose_at_boundaries(self):
        self.assertIsNotNone(solve_pose(REFERENCE_PARAMS, 0))
        self.assertIsNotNone(solve_pose(REFERENCE_PARAMS, 90))


class TestMechanismPose(unittest.TestCase):
    def setUp(self):
        self.params = REFERENCE_PARAMS
        self.linkage = Linkage.from_params(self.params)

    def test_01_memoryless(self):
        first = solve_pose(self.params, 30.0, "y")
        solve_pose(self.params, 75.0, "y")
        again = solve_pose(self.params, 30.0, "y")
        self.assertEqual(first, again)

    def test_02_axis_defaults_to_params(self):
        pose = solve_pose(DesignParams(rotation_axis='y'), 10.0)
        self.assertIs(pose.axis, RotationAxis.Y)
        pose = solve_pose(DesignParams(rotation_axis='y'), 10.0, RotationAxis.X)
        self.assertIs(pose.axis, RotationAxis.X)

    def test_03_hinges_at_rest(self):
        hinges = hinge_placements(self.params, self.linkage, 0.0, RotationAxis.Y)
        self.assertEqual(len(hinges), 8)
        by_name = {h.name: h for h in hinges}

        lower = by_name["leg_front_left_hinge_lower"]
        upper = by_name["leg_front_left_hinge_upper"]
        for expected, actual in zip((40.0, 70.0, 20.0), lower.position):
            self.assertAlmostEqual(actual, expected)
        for expected, actual in zip((100.0, 70.0, 320.0), upper.position):
            self.assertAlmostEqual(actual, expected)
        self.assertFalse(lower.upper)
        self.assertTrue(upper.upper)
        self.assertEqual(lower.angle, 90.0)

    def test_04_hinges_on_x_axis(self):
        hinges = hinge_placements(self.params, self.linkage, 0.0, RotationAxis.X)
        lower = [h for h in hinges if h.name == "leg_front_left_hinge_lower"][0]
        for expected, actual in zip((70.0, 40.0, 20.0), lower.position):
            self.assertAlmostEqual(actual, expected)

    def test_05_upper_hinges_follow_upper_base(self):
        """Upper hinge axes stay one leaf under the moving plane."""
        for axis in ("x", "y"):
            for theta in (0.0, 12.5, 60.0, 90.0):
                pose = solve_pose(self.params, theta, axis)
                index = 0 if axis == "y" else 1
                for leg, upper in zip(pose.legs, [h for h in pose.hinges if h.upper]):
                    self.assertAlmostEqual(
                        upper.position[2] + self.params.hinge_thickness,
                        pose.upper_offset[2],
                    )
                    self.assertAlmostEqual(
                        upper.position[index] - (leg.origin[index] + self.params.leg_width),
                        pose.upper_offset[index],
                    )
                    self.assertEqual(upper.angle, 90.0 - theta)

    def test_06_rope_taut_at_rest(self):
        pose = solve_pose(self.params, 0.0)
        self.assertEqual(len(pose.ropes), 2)
        for rope in pose.ropes:
            self.assertTrue(rope.taut)
            self.assertEqual(rope.end, rope.bolt)
            self.assertAlmostEqual(math.dist(rope.start, rope.end), rope.length)
            self.assertGreater(rope.angle, 0.0)
            self.assertLess(rope.angle, 90.0)

    def test_07_rope_stowed_when_folding(self):
        rest = solve_pose(self.params, 0.0)
        for theta in (0.5, 45.0, 90.0):
            pose = solve_pose(self.params, theta)
            for rope, rest_rope in zip(pose.ropes, rest.ropes):
                self.assertFalse(rope.taut)
                self.assertEqual(rope.angle, 0.0)
                self.assertAlmostEqual(rope.start[2], rope.end[2])
                self.assertAlmostEqual(rope.length, rest_rope.length)
                self.assertAlmostEqual(
                    rope.start[2],
                    pose.upper_offset[2] - self.params.ring_diameter,
                )

    def test_08_pose_to_dict(self):
        d = solve_pose(self.params, 0.0, "x").to_dict()
        self.assertEqual(d['axis'], 'x')
        self.assertTrue(d['ropes_taut'])
        self.assertAlmostEqual(d['vertical_separation'], 304.0)

    def test_09_axis_names_are_lowercase(self):
        self.assertIs(RotationAxis.parse('x'), RotationAxis.X)
        self.assertIs(RotationAxis.parse(RotationAxis.Y), RotationAxis.Y)
        for name in ('X', 'Y', 'z'):
            with self.assertRaises(ValueError):
                RotationAxis.parse(name)
        # DesignParams.validate agrees with the parser
        ok, errors = DesignParams(rotation_axis='X').validate()
        self.assertFalse(ok)
        self.assertTrue(any('rotation_axis' in e for e in errors))

    def test_10_rope_states_one_per_rope(self):
        ropes = rope_states(self.params, self.linkage, 0.0, RotationAxis.X)
        self.assertEqual([r.name for r in ropes], ['rope_1', 'rope_2'])
        self.assertEqual(ropes, solve_pose(self.params, 0.0, 'x').ropes)


class TestAnimation(unittest.TestCase):
    def test_01_clamped_ends(self):
        for t in (-0.5, 0.0, 0.05, 0.1):
            self.assertEqual(opening_angle_at(t), 0.0)
        for t in (0.9, 0.95, 1.0, 1.5):
            self.assertEqual(opening_angle_at(t), 90.0)

    def test_02_linear_middle(self):
        self.assertAlmostEqual(opening_angle_at(0.5), 45.0)
        self.assertAlmostEqual(opening_angle_at(0.3), 22.5)
        self.assertAlmostEqual(opening_angle_at(0.5, clamp=0.0), 45.0)
        self.assertAlmostEqual(opening_angle_at(0.25, clamp=0.0), 22.5)

    def test_03_invalid_clamp(self):
        with self.assertRaises(ValueError):
            opening_angle_at(0.5, clamp=0.5)

    def test_04_frame_times(self):
        self.assertEqual(frame_times(1), [0.0])
        self.assertEqual(frame_times(3), [0.0, 0.5, 1.0])
        with self.assertRaises(ValueError):
            frame_times(0)

    def test_05_pose_table(self):
        with self.assertLogs("skidryer.kinematics", level="ERROR"):
            table = pose_table(REFERENCE_PARAMS, [0.0, 45.0, 91.0], "y")
        self.assertEqual(len(table), 2)
        self.assertEqual(list(table['theta']), [0.0, 45.0])
        self.assertAlmostEqual(table['vertical_separation'][0], 304.0)
        self.assertAlmostEqual(table['offset_z'][0], 322.0)
        self.assertTrue(table['ropes_taut'][0])
        self.assertFalse(table['ropes_taut'][1])
        self.assertEqual(table['hinge_angle'][1], 45.0)


if __name__ == '__main__':
    unittest.main()
