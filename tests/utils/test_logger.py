from tests import TestCaseGeomPhantoms
from geomphantoms.geometries import Ellipsoid, CylinderZ
from geomphantoms.utils import LazyLog, log_shapes, setup_logger
from geomphantoms.utils.logger import _log_args
from argparse import Namespace
import logging
import os
import tempfile


class TestLogger(TestCaseGeomPhantoms):
    def test_lazy_log(self):
        calls = []

        def message():
            calls.append(1)
            return "rendered"

        log = LazyLog(message)
        self.assertEqual(len(calls), 0)
        self.assertEqual(str(log), "rendered")
        self.assertEqual(len(calls), 1)

    def test_log_shapes(self):
        shapes = [
            Ellipsoid(0, 0, 0, 1, 1, 1, 1.0),
            Ellipsoid(0, 0, 0, 2, 2, 2, 1.0),
            CylinderZ(0, 0, 0, 1, 1, 1.0),
        ]
        self.assertEqual(str(log_shapes(shapes)), "3 shapes (2 Ellipsoid, 1 CylinderZ)")
        self.assertEqual(str(log_shapes([])), "0 shapes ()")

    def test_log_args(self):
        text = _log_args(Namespace(size="8,8", out=None, verbose=2))
        self.assertIn("size    : 8,8", text)
        self.assertIn("verbose : 2", text)
        self.assertNotIn("out", text)

    def test_setup_logger(self):
        filename = os.path.join(tempfile.mkdtemp(), "log.txt")
        setup_logger(filename, 2)
        self.assertEqual(logging.getLogger().level, logging.DEBUG)
        logging.debug("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        with open(filename) as f:
            self.assertIn("written to file", f.read())
        setup_logger(None, 0)
        self.assertEqual(logging.getLogger().level, logging.WARNING)
