"""
Integration tests for the opening placement batch (holecast_engine.run).

Each test builds the three-model sample project (architecture, HVAC,
plumbing) and runs the full batch against the in-memory host.
"""
import os
import unittest
from holecast_engine import HolecastConfig, run
from holecast_types import (
    CollaboratorFailure,
    DocumentNotFoundError,
    FamilyNotFoundError,
    Identity,
    UnsupportedGeometryError,
    ViewNotFoundError,
)
from backend import get_raycast_backend, get_surface_index, set_raycast_backend
from holecast_profile import get_profile_results, is_profiling
from elements.solvers import WallSurfaceIndex
from host.hc_document import HostDocument
from mathutils.hc_curves import Arc, Line
from tests.test_fixtures.assertions import assert_point_close
from tests.test_fixtures.mocks import (
    HEIGHT_PARAMETER,
    WIDTH_PARAMETER,
    build_sample_project,
)


class OpeningPlacementTests(unittest.TestCase):
    """End-to-end placement over the sample project."""

    def setUp(self):
        self.project = build_sample_project()

    def tearDown(self):
        set_raycast_backend('python')

    def assertOpenings(self, openings, *expected):
        """Check (host wall, point) for each opening, in creation order."""
        self.assertEqual(len(openings), len(expected), f"openings: {[(o.host_id, o.point) for o in openings]}")
        for opening, (host_id, point) in zip(openings, expected):
            self.assertEqual(opening.host_id, host_id)
            assert_point_close(self, opening.point, point)

    # ========================================================================
    # SUCCESSFUL BATCHES
    # ========================================================================

    def testSampleProject(self):
        """The duct crosses both walls, the pipe only the first, the riser none"""
        result = run(self.project.documents)

        wall_a, wall_b = Identity(self.project.wall_a.id), Identity(self.project.wall_b.id)
        self.assertIs(result.document, self.project.arch)
        self.assertOpenings(result.duct_openings, (wall_a, [4.75, 0, 3]), (wall_b, [14.75, 0, 3]))
        self.assertOpenings(result.pipe_openings, (wall_a, [4.75, 2, 1]))
        self.assertEqual(result.stats, {
            'duct_count': 1,
            'pipe_count': 2,
            'opening_count': 3,
            'skipped_count': 0,
        })
        self.assertEqual(len(self.project.arch.openings), 3)
        self.assertIsNone(result.timings)

    def testOpeningsAreSizedByDiameter(self):
        """Width and height both receive the element diameter"""
        result = run(self.project.documents)

        for opening in result.duct_openings:
            self.assertEqual(opening.lookup_parameter(WIDTH_PARAMETER).value, 0.8)
            self.assertEqual(opening.lookup_parameter(HEIGHT_PARAMETER).value, 0.8)
        self.assertEqual((result.pipe_openings[0].width, result.pipe_openings[0].height), (0.1, 0.1))

    def testOpeningsTakeHostWallLevel(self):
        result = run(self.project.documents)

        self.assertTrue(all(o.level is self.project.level_1 for o in result.openings))

    def testSymbolIsActivated(self):
        self.assertFalse(self.project.symbol.is_active)

        run(self.project.documents)

        self.assertTrue(self.project.symbol.is_active)
        self.assertIsNone(self.project.arch.active_transaction)

    def testTwoDuctsThroughOneWallGetTwoOpenings(self):
        """Deduplication is per element, never across elements"""
        self.project.hvac.add_duct(Line((0, 4, 3), (8, 4, 3)), 0.4)

        result = run(self.project.documents)

        wall_a = Identity(self.project.wall_a.id)
        self.assertEqual([o.host_id for o in result.duct_openings][-1], wall_a)
        self.assertEqual(sum(1 for o in result.duct_openings if o.host_id == wall_a), 2)

    def testLinkedWallsReceiveOpenings(self):
        """Walls of a linked model are hit at their offset position"""
        linked = HostDocument("Linked_АР")
        linked_wall = linked.add_wall((0, -10, 0), (0, 10, 0), 0.2, 10.0)
        link = self.project.arch.add_link(linked, offset=(10, 0, 0))

        result = run(self.project.documents)

        linked_id = Identity(link.id, linked_wall.id)
        wall_a, wall_b = Identity(self.project.wall_a.id), Identity(self.project.wall_b.id)
        self.assertOpenings(result.duct_openings,
                            (wall_a, [4.75, 0, 3]),
                            (linked_id, [9.9, 0, 3]),
                            (wall_b, [14.75, 0, 3]))
        self.assertOpenings(result.pipe_openings, (wall_a, [4.75, 2, 1]), (linked_id, [9.9, 2, 1]))

    def testNoPenetrationsCommitsNothing(self):
        """Elements missing every wall give an empty, successful batch"""
        self.project.hvac.ducts.clear()
        self.project.plumbing.pipes.clear()

        result = run(self.project.documents)

        self.assertEqual(result.openings, [])
        self.assertEqual(result.stats['opening_count'], 0)

    def testNumpyBackendMatchesPython(self):
        python_result = run(self.project.documents)
        numpy_project = build_sample_project()

        numpy_result = run(numpy_project.documents, backend='numpy')

        self.assertEqual([o.host_id for o in numpy_result.openings],
                         [o.host_id for o in python_result.openings])
        for numpy_opening, python_opening in zip(numpy_result.openings, python_result.openings):
            assert_point_close(self, numpy_opening.point, tuple(python_opening.point))

    def testActiveTitleSelectsArchitecturalModel(self):
        documents = [self.project.hvac, self.project.plumbing, self.project.arch]

        result = run(documents, HolecastConfig(active_title="АР"))

        self.assertIs(result.document, self.project.arch)
        self.assertEqual(result.stats['opening_count'], 3)

    @unittest.skipIf(bool(os.environ.get("HOLECAST_NO_PROFILING")), "profiling compiled out")
    def testProfileTimings(self):
        result = run(self.project.documents, profile=True)

        for marker in ("discover", "build_surface_index", "place_openings", "resolve_intersections"):
            self.assertIn(marker, result.timings)
        self.assertEqual(result.timings["resolve_intersections"]["count"], 3)

    def testRepeatedRunsKeepNoProfileData(self):
        """Batches run with or without profiling leave nothing recorded afterwards"""
        for profile in (False, True, False):
            run(build_sample_project().documents, profile=profile)

            self.assertFalse(is_profiling())
            self.assertEqual(get_profile_results(), {})

    def testBackendIsRestoredAfterRun(self):
        run(self.project.documents, backend='numpy')

        self.assertEqual(get_raycast_backend(), 'python')
        self.assertIs(get_surface_index(), WallSurfaceIndex)

    def testBackendIsRestoredAfterFailedRun(self):
        set_raycast_backend('numpy')

        with self.assertRaises(DocumentNotFoundError):
            run([self.project.arch], backend='python')

        self.assertEqual(get_raycast_backend(), 'numpy')

    def testConfigIsNotMutatedByOverrides(self):
        config = HolecastConfig()

        run(self.project.documents, config, backend='numpy', on_unsupported='skip')

        self.assertEqual(config.backend, 'python')
        self.assertEqual(config.on_unsupported, 'fail')

    # ========================================================================
    # UNSUPPORTED GEOMETRY
    # ========================================================================

    def testCurvedDuctAbortsWholeBatch(self):
        """With the default policy nothing is committed, but activation stays"""
        curved = self.project.hvac.add_duct(Arc((0, -2, 3), (8, -2, 3), (4, -5, 3)), 0.3)

        with self.assertRaises(UnsupportedGeometryError) as context:
            run(self.project.documents)

        self.assertEqual(context.exception.element_id, curved.id)
        self.assertEqual(self.project.arch.openings, {})
        self.assertTrue(self.project.symbol.is_active)
        self.assertIsNone(self.project.arch.active_transaction)

    def testCurvedDuctSkipped(self):
        curved = self.project.hvac.add_duct(Arc((0, -2, 3), (8, -2, 3), (4, -5, 3)), 0.3)

        with self.assertLogs("holecast.engine", level="WARNING") as logs:
            result = run(self.project.documents, on_unsupported='skip')

        self.assertEqual(result.skipped, [curved.id])
        self.assertEqual(result.stats['skipped_count'], 1)
        self.assertEqual(result.stats['opening_count'], 3)
        self.assertTrue(any(str(curved.id) in line for line in logs.output))

    def testUnknownPolicyRaises(self):
        with self.assertRaises(ValueError):
            run(self.project.documents, on_unsupported='ignore')

    # ========================================================================
    # HOST FAILURES
    # ========================================================================

    def testMissingHvacModel(self):
        with self.assertRaises(DocumentNotFoundError):
            run([self.project.arch, self.project.plumbing])
        self.assertFalse(self.project.symbol.is_active)

    def testOnlyTemplateViews(self):
        self.project.arch.views = [v for v in self.project.arch.views if v.is_template]

        with self.assertRaises(ViewNotFoundError):
            run(self.project.documents)

    def testMissingOpeningFamily(self):
        with self.assertRaises(FamilyNotFoundError):
            run(self.project.documents, HolecastConfig(opening_family_name="Door"))

    def testMissingSizeParameterRollsBack(self):
        """A family without the height parameter fails on the first opening; all are undone"""
        project = build_sample_project(parameter_names=(WIDTH_PARAMETER,))

        with self.assertLogs("holecast.engine", level="ERROR"):
            with self.assertRaises(CollaboratorFailure):
                run(project.documents)

        self.assertEqual(project.arch.openings, {})
        self.assertTrue(project.symbol.is_active)

    def testHostFailureDuringPipesRollsBackDucts(self):
        """A failure on the pipe opening undoes the duct openings too"""
        project = self.project
        calls = []
        original_place = project.arch.place_instance

        def place_then_fail(point, host_surface_id, *args):
            calls.append(host_surface_id)
            if len(calls) == 3:
                raise CollaboratorFailure("host refused the opening")
            return original_place(point, host_surface_id, *args)

        project.arch.place_instance = place_then_fail

        with self.assertRaises(CollaboratorFailure):
            run(project.documents)

        self.assertEqual(len(calls), 3)
        self.assertEqual(project.arch.openings, {})


if __name__ == '__main__':
    unittest.main()
