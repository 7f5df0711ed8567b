"""
Enumerate every tile URL a tileset descriptor can produce.

The walk goes west to east, south to north, min zoom to max zoom, and
template by template. Samples are taken every ``step`` degrees regardless
of zoom, so high zoom levels are only sparsely covered. That approximation
is intentional and must stay.

Fair warning: at higher zoom levels or for big maps this yields a lot of
URLs. Everything here is lazy and performs no I/O.
"""

import math
from typing import Iterable, Iterator

from .coverage import GeoBounds, TileMath
from .descriptor import DescriptorResult, TilesetDescriptor

# Absorbs float error so an axis that is an exact multiple of the step
# still includes its far boundary.
_STEP_EPSILON = 1e-9


def axis_samples(start: float, end: float, step: float) -> Iterator[float]:
    """Yield start, start + step, ... up to and including end."""
    if step <= 0:
        raise ValueError("step must be positive")
    if end < start:
        return
    count = math.floor((end - start) / step + _STEP_EPSILON) + 1
    for i in range(count):
        yield start + i * step


def axis_count(start: float, end: float, step: float) -> int:
    if end < start:
        return 0
    return math.floor((end - start) / step + _STEP_EPSILON) + 1


def coordinate_samples(bounds: GeoBounds, step: float) -> Iterator[tuple[float, float]]:
    """Yield (longitude, latitude) pairs covering the bounds."""
    for lon in axis_samples(bounds.west, bounds.east, step):
        for lat in axis_samples(bounds.south, bounds.north, step):
            yield lon, lat


def zoom_levels(descriptor: TilesetDescriptor) -> range:
    return range(descriptor.min_zoom, descriptor.max_zoom + 1)


class TileSpaceEnumerator:
    """Turn tileset descriptors into concrete tile URLs."""

    def __init__(self, step: float = 1.0, verbose: bool = False):
        if step <= 0:
            raise ValueError("step must be positive")
        self.step = step
        self.verbose = verbose

    def enumerate(self, descriptor: TilesetDescriptor) -> Iterator[str]:
        """
        Yield one URL per (lon, lat, zoom, template) combination.

        Calling this again on the same descriptor yields the same sequence.
        """
        for lon, lat in coordinate_samples(descriptor.bounds, self.step):
            for zoom in zoom_levels(descriptor):
                coord = TileMath.to_tile(lon, lat, zoom)
                if self.verbose:
                    print(f"[Tiles] Longitude: {lon}; Latitude: {lat}; Zoom: {zoom}", flush=True)
                for template in descriptor.url_templates:
                    yield template.expand(coord)

    def count(self, descriptor: TilesetDescriptor) -> int:
        """Number of URLs enumerate() will yield, without building them."""
        bounds = descriptor.bounds
        return (
            axis_count(bounds.west, bounds.east, self.step)
            * axis_count(bounds.south, bounds.north, self.step)
            * len(zoom_levels(descriptor))
            * len(descriptor.url_templates)
        )

    def enumerate_all(self, results: Iterable[DescriptorResult]) -> Iterator[str]:
        """
        Enumerate several descriptors in order.

        Failed results are reported and skipped; they never stop the
        remaining descriptors from being enumerated.
        """
        for result in results:
            if not result.ok:
                print(f"[Tiles] Skipping {result.source}: {result.error}", flush=True)
                continue
            descriptor = result.descriptor
            print(
                f"[Tiles] {descriptor.name or result.source}: "
                f"{self.count(descriptor)} tile requests "
                f"(z{descriptor.min_zoom}-{descriptor.max_zoom}, "
                f"{len(descriptor.url_templates)} templates)",
                flush=True,
            )
            yield from self.enumerate(descriptor)
