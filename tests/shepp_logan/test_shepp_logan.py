from tests import TestCaseGeomPhantoms, centered_position
from tests.phantom3d import phantom3d
from geomphantoms.shepp_logan import (
    ELLIPSOIDS,
    SheppLoganIntensities,
    SheppLoganMask,
    ct_shepp_logan_intensities,
    mri_shepp_logan_intensities,
    shepp_logan_parameters_from_dict,
    shepp_logan_shapes,
    create_shepp_logan_phantom,
    create_shepp_logan_phantom_2d,
)
from geomphantoms.shepp_logan.intensities import get_intensity
from geomphantoms.geometries import Additive, Masking
from geomphantoms.utils import centered_axis
import dataclasses
import torch


class TestSheppLogan(TestCaseGeomPhantoms):
    def test_shape_dtype(self):
        phantom = create_shepp_logan_phantom(16, 12, 8)
        self.assertEqual(phantom.shape, (16, 12, 8))
        self.assertEqual(phantom.dtype, torch.float32)
        phantom = create_shepp_logan_phantom(8, 8, 8, dtype=torch.complex64)
        self.assertEqual(phantom.dtype, torch.complex64)
        phantom = create_shepp_logan_phantom_2d(16, 12, "coronal", dtype="float64")
        self.assertEqual(phantom.shape, (16, 12))
        self.assertEqual(phantom.dtype, torch.float64)

    def test_center(self):
        # odd grids sample the origin
        phantom = create_shepp_logan_phantom_2d(21, 21, "axial")
        self.assertAlmostEqual(phantom[10, 10].item(), 2.0 - 0.98, places=5)
        phantom = create_shepp_logan_phantom_2d(
            21, 21, "axial", ti=mri_shepp_logan_intensities()
        )
        self.assertAlmostEqual(phantom[10, 10].item(), 1.0 - 0.8, places=5)
        # outside the skull
        self.assertEqual(phantom[0, 0].item(), 0)

    def test_default_intensities(self):
        phantom = create_shepp_logan_phantom(8, 8, 8, ti=SheppLoganIntensities())
        self.assertEqual(phantom.abs().sum().item(), 0)

    def test_central_slice(self):
        volume = create_shepp_logan_phantom(32, 28, 17)
        image = create_shepp_logan_phantom_2d(32, 28, "axial")
        self.assert_tensor_equal(image, volume[:, :, 8])

    def test_2d_matches_3d(self):
        nx, ny, nz = 26, 30, 22
        volume = create_shepp_logan_phantom(nx, ny, nz)
        for k in (4, 9, 17):
            image = create_shepp_logan_phantom_2d(
                nx, ny, "axial", slice_position=centered_position(k, nz, 20.0)
            )
            self.assert_tensor_equal(image, volume[:, :, k])
            image = create_shepp_logan_phantom_2d(
                nx, nz, "coronal", slice_position=centered_position(k, ny, 20.0)
            )
            self.assert_mostly_equal(image, volume[:, k], 0.02)
            image = create_shepp_logan_phantom_2d(
                ny, nz, "sagittal", slice_position=centered_position(k, nx, 20.0)
            )
            self.assert_mostly_equal(image, volume[k], 0.02)

    def test_reference(self):
        n = 40
        phantom = create_shepp_logan_phantom(n, n, n, dtype=torch.float64)
        ax = (centered_axis(n, 20.0) / 8).numpy()
        ref = torch.tensor(phantom3d(ax, ax, ax))
        mismatch = (torch.abs(phantom - ref) > 1e-6).sum().item() / phantom.numel()
        self.assertLess(mismatch, 0.001)

    def test_extra_ellipsoids(self):
        # the two restored ellipsoids sit above the central slice
        ti = SheppLoganMask(extra_2=True)
        self.assertFalse(create_shepp_logan_phantom_2d(64, 64, "axial", ti=ti).any())
        self.assertTrue(
            create_shepp_logan_phantom_2d(
                64, 64, "axial", slice_position=7.0, ti=ti
            ).any()
        )
        ti = SheppLoganMask(extra_1=True)
        self.assertTrue(
            create_shepp_logan_phantom_2d(
                64, 64, "axial", slice_position=2.5, ti=ti
            ).any()
        )

    def test_mask(self):
        skull = create_shepp_logan_phantom_2d(
            65, 65, "axial", ti=SheppLoganMask(skull=True)
        )
        self.assertEqual(skull.dtype, torch.bool)
        self.assertTrue(skull.any())
        # the brain is drawn over the skull
        self.assertFalse(skull[32, 32])
        brain = create_shepp_logan_phantom_2d(
            65, 65, "axial", ti=SheppLoganMask(brain=True)
        )
        self.assertTrue(brain[32, 32])
        self.assertFalse((skull & brain).any())
        mask = create_shepp_logan_phantom(
            8, 8, 8, ti=SheppLoganMask(skull=True), dtype=torch.float32
        )
        self.assertEqual(mask.dtype, torch.bool)

    def test_parameters(self):
        self.assertEqual(len(ELLIPSOIDS), 12)
        self.assertEqual(len(shepp_logan_shapes(ct_shepp_logan_intensities())), 12)
        ct = ct_shepp_logan_intensities()
        self.assertEqual(get_intensity(ct, "skull"), Additive(2.0))
        self.assertEqual(get_intensity(SheppLoganMask(top=True), "top"), Masking(True))
        with self.assertRaises(ValueError):
            get_intensity(ct, "ventricle")
        ti = shepp_logan_parameters_from_dict({"skull": 1, "brain": "-0.5"})
        self.assertEqual(ti.skull, 1.0)
        self.assertEqual(ti.brain, -0.5)
        self.assertEqual(ti.top, 0.0)
        ti = shepp_logan_parameters_from_dict({"skull": 1}, mask=True)
        self.assertIsInstance(ti, SheppLoganMask)
        with self.assertRaises(ValueError):
            shepp_logan_parameters_from_dict({"ventricle": 1.0})

    def test_errors(self):
        with self.assertRaises(ValueError):
            create_shepp_logan_phantom(8, -1, 8)
        with self.assertRaises(ValueError):
            create_shepp_logan_phantom_2d(8, 8, "axial", fovs=(20, 20, 20))
        with self.assertRaises(ValueError):
            create_shepp_logan_phantom_2d(8, 8, "transverse")

    def test_skull_intensity(self):
        # removing the skull lowers every voxel inside it by exactly 2
        n = 48
        ct = ct_shepp_logan_intensities()
        phantom = create_shepp_logan_phantom(n, n, n, ti=ct, dtype=torch.float64)
        no_skull = create_shepp_logan_phantom(
            n, n, n, ti=dataclasses.replace(ct, skull=0.0), dtype=torch.float64
        )
        ax = centered_axis(n, 20.0) / 8
        skull = shepp_logan_shapes(ct)[0]
        inside = skull.inside(ax.view(-1, 1, 1), ax.view(1, -1, 1), ax.view(1, 1, -1))
        delta = phantom - no_skull
        self.assert_tensor_close(
            delta[inside], torch.full_like(delta[inside], 2.0), atol=1e-12, rtol=0
        )
        self.assertEqual(delta[~inside].abs().max().item(), 0)
