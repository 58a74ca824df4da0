import argparse
import logging
import time
from functools import wraps
from typing import Callable, Optional, Sequence, TypeVar

from attrs import frozen, field
from more_itertools import consumer

T = TypeVar('T')


@frozen
class Config:
    """Settings for a single run, built once from the command line"""
    keyfile: str
    view_id: str
    debug: bool = field(default=False)


@consumer
def get_debug(parser: argparse.ArgumentParser):
    """Grab the debug switch from the command line

    * -d / --debug: log transport traffic, parsed flags and timings
    """
    parser.add_argument(
        '-d', '--debug',
        action='store_true',
        default=False,
        help='Enable debug mode.')
    args = (yield)
    yield args.debug


@consumer
def get_keyfile(parser: argparse.ArgumentParser):
    """Grab the path of the service account JSON key file"""
    parser.add_argument(
        '-k', '--keyfile',
        required=True,
        help='Path to JSON key file.')
    args = (yield)
    yield args.keyfile


@consumer
def get_view_id(parser: argparse.ArgumentParser):
    """Grab the Analytics view ID to pull data from"""
    parser.add_argument(
        '-v', '--view-id',
        required=True,
        help='Google Analytics View ID.')
    args = (yield)
    yield args.view_id


def parse_args(argv: Optional[Sequence[str]] = None, **kwargs) -> dict:
    """Flexible interface for a script to request one or more argument parsers.

    Each value in a key / value pair should be a function that:
    * Accepts an instance of argparse.ArgumentParser()
    * Adds one or more arguments to the parser before yielding control back
    * Recieves an args list passed via Generator.send()
    * Returns some parsed data based on the args list, depending only on the
        args it declared on the parser

    Each option passed to parse_args should be a keyword / generator pair.
    The function returns a dict pairing the keywords with the values returned
    by their functions.
    """
    parser = argparse.ArgumentParser(
        description='Print a Google Analytics report for the last 7 days')
    opts = {key: kwargs[key](parser) for key in kwargs}

    parsed = parser.parse_args(argv)
    return {key: opts[key].send(parsed) for key in opts}


def get_config(argv: Optional[Sequence[str]] = None) -> Config:
    opts = parse_args(
        argv=argv, debug=get_debug, keyfile=get_keyfile, view_id=get_view_id)
    return Config(opts['keyfile'], opts['view_id'], opts['debug'])


def time_track(name: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Log how long the decorated function ran, whether or not it raised"""
    def decorate(fn: Callable[..., T]) -> Callable[..., T]:
        @wraps(fn)
        def timed(*args, **kwargs) -> T:
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start
                logging.debug(
                    f"Time track for '{name}' (ExecTime={elapsed * 1000:0.3f}ms)")
        return timed
    return decorate
