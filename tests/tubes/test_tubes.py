from tests import TestCaseGeomPhantoms
from geomphantoms.tubes import (
    TubesGeometry,
    TubesIntensities,
    TubesMask,
    create_tubes_phantom,
    create_tubes_phantom_2d,
    tubes_geometry_from_dict,
    tubes_parameters_from_dict,
    tubes_shapes,
)
from geomphantoms.tubes.phantom import tubes_axis
from geomphantoms.geometries import CylinderZ, Masking
import math
import torch


class TestTubes(TestCaseGeomPhantoms):
    def test_shape_dtype(self):
        phantom = create_tubes_phantom(16, 12, 8)
        self.assertEqual(phantom.shape, (16, 12, 8))
        self.assertEqual(phantom.dtype, torch.float32)
        phantom = create_tubes_phantom_2d(16, 12, "sagittal", dtype="complex64")
        self.assertEqual(phantom.shape, (16, 12))
        self.assertEqual(phantom.dtype, torch.complex64)

    def test_values(self):
        ti = TubesIntensities()
        phantom = create_tubes_phantom(32, 32, 32)
        values = torch.tensor(
            [0.0, ti.outer_cylinder, ti.tube_wall] + list(ti.tube_fillings),
            dtype=torch.float32,
        )
        self.assertTrue(torch.isin(phantom.unique(), values).all())

    def test_layout(self):
        n = 101
        ti = TubesIntensities()
        tg = TubesGeometry()
        image = create_tubes_phantom_2d(n, n, "axial")
        ax = tubes_axis(n, 10.0)
        # the centre is filled by the outer cylinder
        self.assertAlmostEqual(image[n // 2, n // 2].item(), ti.outer_cylinder)
        # the corners are outside
        self.assertEqual(image[0, 0].item(), 0)
        shapes = tubes_shapes(tg, ti)
        fillings = shapes[2::2]
        self.assertEqual(len(fillings), 6)
        for shape, value in zip(fillings, ti.tube_fillings):
            i = torch.argmin(torch.abs(ax - shape.cx)).item()
            j = torch.argmin(torch.abs(ax - shape.cy)).item()
            self.assertAlmostEqual(image[i, j].item(), value, places=6)

    def test_shapes(self):
        tg = TubesGeometry()
        shapes = tubes_shapes(tg, TubesIntensities())
        self.assertEqual(len(shapes), 13)
        self.assertTrue(all(isinstance(s, CylinderZ) for s in shapes))
        self.assertEqual(shapes[0].r, tg.outer_radius)
        self.assertEqual(shapes[0].height, tg.outer_height)
        for wall, filling in zip(shapes[1::2], shapes[2::2]):
            self.assertEqual((wall.cx, wall.cy), (filling.cx, filling.cy))
            self.assertGreater(wall.r, filling.r)
            self.assertAlmostEqual(
                wall.height - filling.height, 2 * tg.tube_wall_thickness
            )
            # every tube stays inside the outer cylinder
            self.assertLessEqual(
                math.hypot(wall.cx, wall.cy) + wall.r, tg.outer_radius + 1e-12
            )
        shapes = tubes_shapes(tg, TubesIntensities(tube_fillings=[0.5, 0.6, 0.7]))
        self.assertEqual(len(shapes), 7)
        self.assertEqual(shapes[6].intensity, Masking(0.7))
        with self.assertRaises(ValueError):
            tubes_shapes(tg, TubesIntensities(tube_fillings=()))

    def test_outside_slice(self):
        # the outer cylinder is 8 cm high
        image = create_tubes_phantom_2d(32, 32, "axial", slice_position=4.5)
        self.assertEqual(image.abs().sum().item(), 0)
        image = create_tubes_phantom_2d(32, 32, "axial", slice_position=3.5)
        self.assertGreater(image.abs().sum().item(), 0)

    def test_stack(self):
        tis = [TubesIntensities(), TubesIntensities(outer_cylinder=1.0, tube_wall=0.5)]
        stack = create_tubes_phantom(16, 16, 16, ti=tis)
        self.assertEqual(stack.shape, (16, 16, 16, 2))
        for m, ti in enumerate(tis):
            self.assert_tensor_equal(
                stack[..., m], create_tubes_phantom(16, 16, 16, ti=ti)
            )
        stack = create_tubes_phantom_2d(16, 16, "coronal", ti=tis)
        self.assertEqual(stack.shape, (16, 16, 2))
        # a stack keeps the requested dtype, masks included
        stack = create_tubes_phantom(8, 8, 8, ti=[TubesMask()], dtype="float64")
        self.assertEqual(stack.dtype, torch.float64)
        with self.assertRaises(ValueError):
            create_tubes_phantom(8, 8, 8, ti=[])

    def test_mask(self):
        mask = create_tubes_phantom(24, 24, 24, ti=TubesMask())
        self.assertEqual(mask.dtype, torch.bool)
        ones = TubesIntensities(1.0, 1.0, (1.0,) * 6)
        self.assert_tensor_equal(mask, create_tubes_phantom(24, 24, 24, ti=ones) != 0)
        # only the fillings
        mask = create_tubes_phantom_2d(
            64, 64, "axial", ti=TubesMask(False, False, (True,) * 6)
        )
        self.assertTrue(mask.any())
        self.assertFalse(mask[32, 32])

    def test_geometry(self):
        tg = TubesGeometry(outer_radius=0.3, gap_fraction=0.0)
        image = create_tubes_phantom_2d(64, 64, "axial", tg=tg)
        ax = tubes_axis(64, 10.0)
        radius = torch.sqrt(ax.view(-1, 1) ** 2 + ax.view(1, -1) ** 2)
        self.assertFalse(image[radius > 0.3].any())
        self.assertEqual(
            tubes_geometry_from_dict({"outer_radius": 0.3, "gap_fraction": 0}), tg
        )
        with self.assertRaises(ValueError):
            tubes_geometry_from_dict({"inner_radius": 0.1})

    def test_parameters(self):
        ti = tubes_parameters_from_dict({"tube_fillings": [1, 2], "tube_wall": 0.1})
        self.assertEqual(ti.tube_fillings, (1.0, 2.0))
        self.assertEqual(ti.outer_cylinder, 0.25)
        mask = tubes_parameters_from_dict({"tube_fillings": [1, 0, 1]}, mask=True)
        self.assertIsInstance(mask, TubesMask)
        self.assertEqual(mask.tube_fillings, (True, False, True))
        with self.assertRaises(ValueError):
            tubes_parameters_from_dict({"fillings": [1]})
