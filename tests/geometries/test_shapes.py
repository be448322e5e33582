from tests import TestCaseGeomPhantoms
from geomphantoms.geometries import (
    Additive,
    Masking,
    as_intensity,
    draw_pixels,
    Ellipsoid,
    SuperEllipsoid,
    RotatedEllipsoid,
    CylinderX,
    CylinderY,
    CylinderZ,
    rotate_coronal,
    rotate_sagittal,
)
import itertools
import math
import torch


def get_shapes():
    return [
        Ellipsoid(0.1, -0.2, 0.05, 0.3, 0.2, 0.4, 1.0),
        SuperEllipsoid(-0.1, 0.0, 0.2, 0.35, 0.25, 0.3, (2.5, 2.5, 3.5), 1.0),
        RotatedEllipsoid(0.0, 0.1, -0.1, 0.4, 0.15, 0.2, 1.2566, 0.0, 0.0, 1.0),
        CylinderX(0.05, 0.0, 0.1, 0.2, 0.6, 1.0),
        CylinderY(0.0, 0.1, 0.0, 0.25, 0.5, 1.0),
        CylinderZ(-0.1, 0.05, 0.0, 0.3, 0.4, 1.0),
    ]


class TestShapes(TestCaseGeomPhantoms):
    def test_intensity(self):
        self.assertEqual(as_intensity(0.5), Masking(0.5))
        self.assertEqual(as_intensity(Additive(0.5)), Additive(0.5))
        self.assertEqual(Ellipsoid(0, 0, 0, 1, 1, 1, 2.0).intensity, Masking(2.0))
        # cylinders always overwrite
        cylinder = CylinderZ(0, 0, 0, 1, 1, Additive(2.0))
        self.assertEqual(cylinder.intensity, Masking(2.0))

    def test_draw_pixels(self):
        view = torch.ones(4)
        mask = torch.tensor([True, False, True, False])
        draw_pixels(view, Additive(0.5), mask)
        self.assert_tensor_equal(view, torch.tensor([1.5, 1.0, 1.5, 1.0]))
        draw_pixels(view, Masking(0.0), mask)
        self.assert_tensor_equal(view, torch.tensor([0.0, 1.0, 0.0, 1.0]))
        with self.assertRaises(TypeError):
            draw_pixels(view, 0.5, mask)
        with self.assertRaises(TypeError):
            draw_pixels(view, True, mask)
        self.assert_tensor_equal(view, torch.tensor([0.0, 1.0, 0.0, 1.0]))

    def test_ellipsoid_inclusive(self):
        e = Ellipsoid(0.0, 0.0, 0.0, 1.0, 2.0, 4.0, 1.0)
        self.assertTrue(e.contains((0, 0, 0)))
        self.assertTrue(e.contains((1, 0, 0)))
        self.assertTrue(e.contains((0, -2, 0)))
        self.assertTrue(e.contains((0, 0, 4)))
        self.assertFalse(e.contains((1.001, 0, 0)))
        self.assertFalse(e.contains((0.8, 1.5, 0)))

    def test_degenerate(self):
        self.assertTrue(Ellipsoid(0, 0, 0, 0.0, 1, 1, 1.0).is_degenerate())
        self.assertFalse(Ellipsoid(0, 0, 0, 0.0, 1, 1, 1.0).contains((0, 0, 0)))
        self.assertTrue(CylinderZ(0, 0, 0, 0.0, 1, 1.0).is_degenerate())
        self.assertTrue(CylinderZ(0, 0, 0, 1.0, -1, 1.0).is_degenerate())
        self.assertFalse(CylinderZ(0, 0, 0, 1.0, 0, 1.0).is_degenerate())
        self.assertTrue(
            RotatedEllipsoid(0, 0, 0, 1, 0, 1, 0.3, 0, 0, 1.0).is_degenerate()
        )

    def test_super_ellipsoid(self):
        e = Ellipsoid(0, 0, 0, 1, 1, 1, 1.0)
        se2 = SuperEllipsoid(0, 0, 0, 1, 1, 1, (2, 2, 2), 1.0)
        se10 = SuperEllipsoid(0, 0, 0, 1, 1, 1, (10, 10, 10), 1.0)
        for p in itertools.product((-0.9, -0.5, 0.0, 0.3, 0.7), repeat=3):
            self.assertEqual(e.contains(p), se2.contains(p))
        # higher exponents fill the corners of the box
        self.assertFalse(e.contains((0.8, 0.8, 0.8)))
        self.assertTrue(se10.contains((0.8, 0.8, 0.8)))
        self.assertFalse(se10.contains((1.01, 0, 0)))
        # fractional exponents on negative deviations
        self.assertTrue(
            SuperEllipsoid(0, 0, 0, 1, 1, 1, (0.5, 0.5, 0.5), 1.0).contains(
                (-0.1, -0.1, -0.1)
            )
        )

    def test_rotated_ellipsoid(self):
        e = Ellipsoid(0.1, 0.2, 0.3, 0.5, 0.2, 0.3, 1.0)
        re = RotatedEllipsoid(0.1, 0.2, 0.3, 0.5, 0.2, 0.3, 0.0, 0.0, 0.0, 1.0)
        for p in itertools.product((-0.3, 0.0, 0.15, 0.4), repeat=3):
            self.assertEqual(e.contains(p), re.contains(p))
        # a quarter turn about z moves the long axis onto y
        re = RotatedEllipsoid(0, 0, 0, 0.5, 0.1, 0.1, math.pi / 2, 0, 0, 1.0)
        self.assertTrue(re.contains((0, 0.45, 0)))
        self.assertFalse(re.contains((0.45, 0, 0)))
        # a quarter turn about y moves the long axis onto z
        re = RotatedEllipsoid(0, 0, 0, 0.5, 0.1, 0.1, 0, math.pi / 2, 0, 1.0)
        self.assertTrue(re.contains((0, 0, -0.45)))
        self.assertFalse(re.contains((0.45, 0, 0)))
        with self.assertRaises(ValueError):
            RotatedEllipsoid(0, 0, 0, 1, 1, 1, 0, 0, 0, 1.0, "oblique")

    def test_cylinders(self):
        cz = CylinderZ(0, 0, 0, 0.5, 2.0, 1.0)
        self.assertTrue(cz.contains((0.5, 0, 0.9)))
        self.assertTrue(cz.contains((0, 0, 1.0)))
        self.assertFalse(cz.contains((0, 0, 1.01)))
        self.assertFalse(cz.contains((0.4, 0.4, 0)))
        cx = CylinderX(0, 0, 0, 0.1, 2.0, 1.0)
        self.assertTrue(cx.contains((0.9, 0.05, 0)))
        self.assertFalse(cx.contains((0, 0.2, 0)))
        cy = CylinderY(0, 0, 0, 0.1, 2.0, 1.0)
        self.assertTrue(cy.contains((0, -0.9, 0.05)))
        self.assertFalse(cy.contains((0, 0, 0.2)))
        self.assertEqual(cz.bounding_radii(), (0.5, 0.5, 1.0))
        self.assertEqual(cy.bounding_radii(), (0.1, 1.0, 0.1))
        self.assertEqual(cx.bounding_radii(), (1.0, 0.1, 0.1))

    def test_cylinder_views(self):
        self.assertIsInstance(rotate_coronal(CylinderZ(0, 0, 0, 1, 1, 1.0)), CylinderY)
        self.assertIsInstance(rotate_sagittal(CylinderZ(0, 0, 0, 1, 1, 1.0)), CylinderY)
        self.assertIsInstance(rotate_coronal(CylinderY(0, 0, 0, 1, 1, 1.0)), CylinderZ)
        self.assertIsInstance(rotate_sagittal(CylinderY(0, 0, 0, 1, 1, 1.0)), CylinderX)
        self.assertIsInstance(rotate_coronal(CylinderX(0, 0, 0, 1, 1, 1.0)), CylinderX)
        self.assertIsInstance(rotate_sagittal(CylinderX(0, 0, 0, 1, 1, 1.0)), CylinderZ)

    def test_views(self):
        # a point (x, y, z) is seen at (x, z, y) in the coronal view and at
        # (y, z, x) in the sagittal view
        coords = (-0.35, -0.12, 0.0, 0.07, 0.21, 0.33)
        points = list(itertools.product(coords, repeat=3))
        for shape in get_shapes():
            coronal = rotate_coronal(shape)
            sagittal = rotate_sagittal(shape)
            self.assertEqual(coronal.intensity, shape.intensity)
            for x, y, z in points:
                inside = shape.contains((x, y, z))
                self.assertEqual(inside, coronal.contains((x, z, y)), shape)
                self.assertEqual(inside, sagittal.contains((y, z, x)), shape)
