# SPDX-License-Identifier: MIT
import zlib

from numpy.random import Generator, PCG64, SeedSequence


def make_rng(seed: int, stream_tag: str) -> Generator:
    """
    Create an independent RNG stream from a common integer seed and a tag.
    This guarantees independence across subsystems (grid init, mutation).
    """
    # crc32 instead of hash(): str hashing is salted per process
    ss = SeedSequence(seed, spawn_key=[zlib.crc32(stream_tag.encode()) & 0xffffffff])
    return Generator(PCG64(ss))
