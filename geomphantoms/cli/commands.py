import time
import argparse
import datetime
import logging
import os
import platform
import re
from typing import List, Optional, Tuple
import numpy as np
import torch
from ..version import __version__
from ..shepp_logan import (
    SheppLoganIntensities,
    create_shepp_logan_phantom,
    create_shepp_logan_phantom_2d,
    ct_shepp_logan_intensities,
    mri_shepp_logan_intensities,
    shepp_logan_parameters_from_dict,
)
from ..torso import (
    create_torso_phantom,
    create_torso_phantom_2d,
    tissue_parameters_from_dict,
)
from ..tubes import (
    create_tubes_phantom,
    create_tubes_phantom_2d,
    tubes_geometry_from_dict,
    tubes_parameters_from_dict,
)
from ..signals import (
    CardiacPhysiology,
    RespiratoryPhysiology,
    generate_cardiac_signals,
    generate_respiratory_signal,
)
from .io import (
    json_dict,
    json_to_value,
    load_cardiac_volumes,
    load_respiratory_signal,
    parse_size,
    record_from_dict,
    resolve_format,
    resolve_signal_format,
    save_output,
    save_signal,
    write_metadata,
)
from ..utils import makedirs, log_args


class Command(object):
    def __init__(self, args: argparse.Namespace) -> None:
        self.args = args
        self.timer: List[Tuple[Optional[str], float]] = []

    def check_args(self) -> None:
        pass

    def get_command(self) -> str:
        return "-".join(
            w.lower() for w in re.findall("[A-Z][^A-Z]*", self.__class__.__name__)
        )

    def new_timer(self, name: Optional[str] = None) -> None:
        t = time.time()
        if len(self.timer) > 1 and self.timer[-1][0] is not None:
            # the previous timer ends
            logging.info(
                "%s finished in %.1f s", self.timer[-1][0], t - self.timer[-1][1]
            )
        if name is None:
            if len(self.timer) == 0:  # begining of command
                pass
            else:  # end of command
                logging.info(
                    "Command 'geomphantoms %s' finished, overall time: %.1f s",
                    self.get_command(),
                    t - self.timer[0][1],
                )
        else:
            logging.info("%s starts ...", name)
        self.timer.append((name, t))

    def makedirs(self) -> None:
        keys = ["out", "meta"]
        makedirs(
            [
                os.path.dirname(getattr(self.args, k) or "")
                for k in keys
                if hasattr(self.args, k)
            ]
        )

    def main(self) -> None:
        self.check_args()
        log_args(self.args)
        self.makedirs()
        self.new_timer()
        self.exec()
        self.new_timer()

    def exec(self) -> None:
        raise NotImplementedError("The exec method for Command is not implemented.")


class Phantom(Command):
    def check_args(self) -> None:
        self.args.size = parse_size(self.args.size)
        self.args.format = resolve_format(self.args.format, self.args.out)
        is_2d = len(self.args.size) == 2
        if is_2d and self.args.plane is None:
            self.args.plane = "axial"
        if not is_2d and self.args.plane is not None:
            logging.warning("<plane> is ignored for a 3D phantom.")
            self.args.plane = None
        if self.args.type != "torso":
            assert (
                self.args.resp_signal is None and self.args.cardiac_signal is None
            ), "Motion signals are only supported by the torso phantom."
        if self.args.type != "tubes":
            assert (
                self.args.stack is None and self.args.geometry is None
            ), "<stack> and <geometry> are only supported by the tubes phantom."
        if self.args.mask is not None and (
            self.args.intensity is not None or self.args.stack is not None
        ):
            logging.warning("Since <mask> is provided, <intensity> would be ignored.")
        if self.args.no_meta:
            self.args.meta = None
        elif self.args.meta is None:
            self.args.meta = self.args.out + ".json"

    def exec(self) -> None:
        self.new_timer("Phantom generation")
        data = build_phantom(self.args)
        logging.info(
            "%s phantom: shape %s, dtype %s",
            self.args.type,
            tuple(data.shape),
            data.dtype,
        )
        self.new_timer("Results saving")
        fovs = phantom_fovs(self.args.type, len(self.args.size))
        # mm per voxel
        voxel_size = [10 * f / n for f, n in zip(fovs, self.args.size)]
        save_output(self.args.out, self.args.format, data, voxel_size)
        if self.args.meta:
            write_metadata(
                self.args.meta,
                {
                    "command": "phantom",
                    "type": self.args.type,
                    "size": self.args.size,
                    "plane": self.args.plane,
                    "slice_position": self.args.slice_position,
                    "format": self.args.format,
                    "output": self.args.out,
                    "shape": list(data.shape),
                    "dtype": str(data.dtype).replace("torch.", ""),
                    "timestamp": datetime.datetime.now().isoformat(),
                    "package_version": __version__,
                    "python_version": platform.python_version(),
                },
            )


class Signals(Command):
    def check_args(self) -> None:
        if self.args.rate is None:
            self.args.rate = 70.0 if self.args.type == "cardiac" else 15.0
        self.args.format = resolve_signal_format(self.args.format, self.args.out)
        assert not (
            self.args.format == "npy" and self.args.type == "cardiac"
        ), "NPY output supports a single series, use CSV or JSON instead."

    def exec(self) -> None:
        self.new_timer("Signal generation")
        physiology = json_dict(self.args.physiology, "--physiology")
        if self.args.type == "respiratory":
            t, signal = generate_respiratory_signal(
                self.args.duration,
                self.args.fs,
                self.args.rate,
                record_from_dict(RespiratoryPhysiology, physiology, "physiology"),
            )
            if self.args.format == "npy":
                data = {"signal": signal}
            else:
                data = {"t": t, "signal": signal}
        else:
            t, volumes = generate_cardiac_signals(
                self.args.duration,
                self.args.fs,
                self.args.rate,
                record_from_dict(CardiacPhysiology, physiology, "physiology"),
            )
            data = dict(t=t, **volumes._asdict())
        logging.info("%d samples generated", len(t))
        self.new_timer("Results saving")
        save_signal(self.args.out, self.args.format, data)


class Info(Command):
    def exec(self) -> None:
        print("geomphantoms %s" % __version__)
        print("Python version: %s" % platform.python_version())
        print("torch version: %s" % torch.__version__)
        print("numpy version: %s" % np.__version__)


def phantom_fovs(phantom_type: str, ndim: int) -> List[float]:
    fov = {"shepp-logan": 20.0, "torso": 30.0, "tubes": 10.0}[phantom_type]
    return [fov] * ndim


def shepp_logan_parameters(args: argparse.Namespace):
    if args.mask is not None:
        return shepp_logan_parameters_from_dict(json_dict(args.mask, "--mask"), True)
    if args.intensity is None:
        return ct_shepp_logan_intensities()
    preset = args.intensity.strip().lower()
    if preset == "ct":
        return ct_shepp_logan_intensities()
    elif preset == "mri":
        return mri_shepp_logan_intensities()
    elif preset == "default":
        return SheppLoganIntensities()
    return shepp_logan_parameters_from_dict(json_dict(args.intensity, "--intensity"))


def tubes_parameters(args: argparse.Namespace):
    if args.mask is not None:
        return tubes_parameters_from_dict(json_dict(args.mask, "--mask"), True)
    if args.stack is not None:
        stack = json_to_value(args.stack)
        if not isinstance(stack, list):
            raise ValueError("--stack must be a JSON array of intensity objects")
        return [tubes_parameters_from_dict(d) for d in stack]
    return tubes_parameters_from_dict(json_dict(args.intensity, "--intensity"))


def build_phantom(args: argparse.Namespace) -> torch.Tensor:
    size = args.size
    is_2d = len(size) == 2
    fovs = phantom_fovs(args.type, len(size))
    if args.type == "shepp-logan":
        ti = shepp_logan_parameters(args)
        if is_2d:
            return create_shepp_logan_phantom_2d(
                *size, args.plane, fovs, args.slice_position, ti
            )
        return create_shepp_logan_phantom(*size, fovs, ti)
    elif args.type == "torso":
        if args.mask is not None:
            ti = tissue_parameters_from_dict(json_dict(args.mask, "--mask"), True)
        else:
            ti = tissue_parameters_from_dict(json_dict(args.intensity, "--intensity"))
        resp = load_respiratory_signal(args.resp_signal)
        cardiac = load_cardiac_volumes(args.cardiac_signal)
        kwargs = dict(
            respiratory_signal=resp,
            cardiac_volumes=cardiac,
            ti=ti,
            num_workers=args.num_workers,
        )
        if is_2d:
            return create_torso_phantom_2d(
                *size, args.plane, fovs, args.slice_position, **kwargs
            )
        return create_torso_phantom(*size, fovs, **kwargs)
    elif args.type == "tubes":
        tg = tubes_geometry_from_dict(json_dict(args.geometry, "--geometry"))
        ti = tubes_parameters(args)
        if is_2d:
            return create_tubes_phantom_2d(
                *size, args.plane, fovs, args.slice_position, tg, ti
            )
        return create_tubes_phantom(*size, fovs, tg, ti)
    else:
        raise ValueError("Unsupported phantom type: %s" % args.type)
