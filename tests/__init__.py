import unittest
import torch
from scipy.spatial.transform import Rotation
import numpy as np


def centered_position(i: int, n: int, fov: float) -> float:
    """position of voxel i on centered_axis(n, fov), as a python float"""
    return (i - (n - 1) / 2) * (fov / n)


class TestCaseGeomPhantoms(unittest.TestCase):
    @staticmethod
    def assert_tensor_close(*args, **kwargs):
        torch.testing.assert_close(*args, **kwargs)

    @staticmethod
    def assert_tensor_equal(*args, **kwargs):
        torch.testing.assert_close(*args, atol=0, rtol=0, **kwargs)

    def assert_mostly_equal(
        self, a: torch.Tensor, b: torch.Tensor, max_fraction: float = 0.01
    ) -> None:
        """at most max_fraction of the voxels may differ, e.g. on boundaries"""
        self.assertEqual(a.shape, b.shape)
        mismatch = (a != b).sum().item() / a.numel()
        self.assertLessEqual(mismatch, max_fraction)

    @staticmethod
    def get_rotation_test_data():
        # (phi, theta, psi) and R = Rz(phi) Ry(theta) Rx(psi)
        angles = [
            [0, 0, 0],
            [np.pi / 2, 0, 0],
            [0, -np.pi / 2, 0],
            [0, 0, np.pi - 0.01],
            [0.1, 0.1, 0.1],
            [-0.1, 0, -0.4],
            [-0.2, 0.2, -0.1],
            [np.pi / 4, np.pi / 4, np.pi / 4],
            [np.pi / 3, -np.pi / 4, np.pi / 5],
            [-72 * np.pi / 180, 0, 0],
        ]
        data = []
        for phi, theta, psi in angles:
            mat = Rotation.from_euler("ZYX", [phi, theta, psi]).as_matrix()
            data.append(((phi, theta, psi), torch.tensor(mat, dtype=torch.float64)))
        return data
