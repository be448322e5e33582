from typing import Callable, Dict, List, Any, Optional, Sequence
from argparse import Namespace
import logging
import traceback
import sys


LEVELS = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}


class LazyLog(object):
    """format the message only when a handler emits it"""

    def __init__(self, func: Callable[..., Any], *args, **kwargs) -> None:
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def __str__(self) -> str:
        return self.func(*self.args, **self.kwargs)


def _log_shapes(shapes: Sequence) -> str:
    counts: Dict[str, int] = dict()
    for shape in shapes:
        name = type(shape).__name__
        counts[name] = counts.get(name, 0) + 1
    items = ["%d %s" % (n, name) for name, n in counts.items()]
    return "%d shapes (%s)" % (len(shapes), ", ".join(items))


def log_shapes(shapes: Sequence) -> LazyLog:
    return LazyLog(_log_shapes, shapes)


def _log_args(args: Namespace) -> str:
    d = {k: v for k, v in vars(args).items() if v is not None}
    width = max((len(k) for k in d), default=0)
    sep = "-" * 40
    lines = ["%s : %s" % (k.ljust(width), v) for k, v in d.items()]
    return "\n".join(["input arguments", sep] + lines + [sep])


def log_args(args: Namespace) -> None:
    logging.debug(LazyLog(_log_args, args))


def setup_logger(filename: Optional[str], verbose: int) -> None:
    log_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if filename:
        handlers.append(logging.FileHandler(filename, mode="w"))
    for handler in handlers:
        handler.setFormatter(log_formatter)

    # force replaces the handlers of an earlier call in the same process
    logging.basicConfig(
        handlers=handlers, level=LEVELS.get(verbose, logging.NOTSET), force=True
    )

    def log_except_hook(*exc_info):
        text = "".join(traceback.format_exception(*exc_info))
        logging.error("Unhandled exception:\n%s", text)

    sys.excepthook = log_except_hook
