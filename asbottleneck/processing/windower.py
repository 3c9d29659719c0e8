# asbottleneck/processing/windower.py

from __future__ import annotations
from typing import Iterator, List, Optional, TextIO, Tuple

from asbottleneck.config import DEFAULT_BIN_WIDTH, LocateConfig
from asbottleneck.datasources.files import open_files
from asbottleneck.datasources.mrt import MrtReader
from asbottleneck.errors import MrtFormatError, UnsortedInputError
from asbottleneck.models import AFI_IPV4, AFI_IPV6, BatchMap, RibRecord
from asbottleneck.output.export import write_bottleneck
from asbottleneck.processing.extract import ingest_record, merge_batches, record_address
from asbottleneck.processing.resolver import find_as_bottleneck
from asbottleneck.utils.logging import get_logger

log = get_logger(__name__)

MAX_OCTET = 255

# RIB dumps list every IPv4 prefix before the first IPv6 one
FAMILIES = (AFI_IPV4, AFI_IPV6)

Position = Tuple[int, int]      # (address family, leading byte)


def iter_bins(width: int = DEFAULT_BIN_WIDTH) -> Iterator[Tuple[int, int]]:
    """
    Yield inclusive (low, high) leading-byte bounds covering [0, 255].

    The last bin's upper bound saturates at 255.
    """
    for low in range(0, MAX_OCTET + 1, width):
        yield low, min(low + width - 1, MAX_OCTET)


class FileCursor:
    """
    Read position of one sorted dump file, kept across bins.

    Bins are swept over IPv4 first and then over IPv6, and a record's
    position is its (family, leading byte) pair. Each bin the cursor reads
    records up to and including the first one positioned beyond the bin.
    That record goes to the carry-over map and the cursor parks on its
    position; it is not read again until a bin reaches it.
    """

    def __init__(self, reader: MrtReader, strict: bool = False):
        self.reader = reader
        self.strict = strict
        self.parked: Optional[Position] = None
        self.exhausted = False
        self._last: Optional[Position] = None
        self._warned = False

    @property
    def name(self) -> str:
        return self.reader.name

    def _check_order(self, position: Position) -> None:
        previous = self._last
        self._last = position
        if previous is None or position >= previous:
            return
        if self.strict:
            raise UnsortedInputError(self.name, previous, position)
        if not self._warned:
            self._warned = True
            log.warning(
                "`%s` is not sorted by prefix (IPv%d leading byte %d after IPv%d "
                "leading byte %d); its later records may be resolved in the wrong bin",
                self.name, position[0], position[1], previous[0], previous[1],
            )

    def advance(self, family: int, high: int, batch: BatchMap, carry: BatchMap) -> int:
        """
        Feed records positioned at or before (``family``, ``high``) into ``batch``.

        Returns the number of RIB records consumed. A stream error marks the
        file exhausted after logging it; whatever was read before stays.
        """
        bound = (family, high)
        if self.exhausted or (self.parked is not None and self.parked > bound):
            return 0
        self.parked = None

        count = 0
        try:
            for record in self.reader:
                if not isinstance(record, RibRecord):
                    continue
                count += 1
                position = record_address(record).position
                self._check_order(position)
                if position > bound:
                    ingest_record(record, carry)
                    self.parked = position
                    return count
                ingest_record(record, batch)
        except MrtFormatError as e:
            log.warning("Problem with gzip mrt file `%s`: %s. Skipping file.", self.name, e)

        self.exhausted = True
        return count

    def close(self) -> None:
        self.reader.close()


def load_unsorted(readers: List[MrtReader]) -> BatchMap:
    """
    Load every RIB record of the unsorted files into one map.
    """
    cache: BatchMap = {}
    for reader in readers:
        log.info("Loading unsorted file `%s`", reader.name)
        try:
            for record in reader:
                if isinstance(record, RibRecord):
                    ingest_record(record, cache)
        except MrtFormatError as e:
            log.warning("Problem with gzip mrt file `%s`: %s. Skipping file.", reader.name, e)
    log.info("Unsorted cache holds %d prefixes", len(cache))
    return cache


class BatchWindower:
    """
    Streams sorted dump files one leading-byte bin at a time, per family.

    Only one bin of sorted data is held in memory, plus the carry-over
    records and the unsorted cache. Entries of the unsorted cache are moved
    into the bin that already holds the same prefix; whatever is left after
    the last bin is resolved on its own by ``flush_unsorted``.
    """

    def __init__(
            self,
            cursors: List[FileCursor],
            unsorted: Optional[BatchMap] = None,
            bin_width: int = DEFAULT_BIN_WIDTH,
    ):
        self.cursors = cursors
        self.unsorted: BatchMap = unsorted if unsorted is not None else {}
        self.bin_width = bin_width
        self.carry: BatchMap = {}

    def _seed(self, family: int, high: int) -> BatchMap:
        batch: BatchMap = {}
        for addr in [a for a in self.carry if a.position <= (family, high)]:
            batch[addr] = self.carry.pop(addr)
        return batch

    def _drain_unsorted(self, batch: BatchMap) -> int:
        moved = 0
        for addr, paths in batch.items():
            extra = self.unsorted.pop(addr, None)
            if extra is not None:
                paths.update(extra)
                moved += 1
        return moved

    def batches(self) -> Iterator[Tuple[int, int, int, BatchMap]]:
        """Yield (family, low, high, batch map) for every bin, in order."""
        for family in FAMILIES:
            for low, high in iter_bins(self.bin_width):
                batch = self._seed(family, high)
                carry: BatchMap = {}
                for i, cursor in enumerate(self.cursors):
                    log.info(
                        "Processing IPv%d chunk with leading byte %d-%d in file %d/%d",
                        family, low, high, i + 1, len(self.cursors),
                    )
                    cursor.advance(family, high, batch, carry)
                merge_batches(self.carry, carry)

                moved = self._drain_unsorted(batch)
                if moved:
                    log.debug(
                        "Merged %d prefixes from unsorted files into IPv%d bin %d-%d",
                        moved, family, low, high,
                    )
                yield family, low, high, batch

    def run(self, out: TextIO) -> int:
        """Resolve and write every bin, then the unsorted residue."""
        written = 0
        for _, _, _, batch in self.batches():
            written += write_bottleneck(find_as_bottleneck(batch), out)
        written += self.flush_unsorted(out)
        return written

    def flush_unsorted(self, out: TextIO) -> int:
        residue, self.unsorted = self.unsorted, {}
        log.info("Writing %d remaining prefixes from unsorted files", len(residue))
        return write_bottleneck(find_as_bottleneck(residue), out)


def locate(config: LocateConfig, out: TextIO) -> int:
    """
    Run the whole pipeline for ``config`` and write results to ``out``.

    Returns the number of prefixes written.
    """
    config.validate()
    sorted_readers = open_files(config.sorted_dir)
    cursors = [FileCursor(r, strict=config.strict_order) for r in sorted_readers]
    try:
        unsorted_readers = open_files(config.unsorted_dir)
        try:
            unsorted = load_unsorted(unsorted_readers)
        finally:
            for reader in unsorted_readers:
                reader.close()

        windower = BatchWindower(cursors, unsorted, bin_width=config.bin_width)
        written = windower.run(out)
    finally:
        for cursor in cursors:
            cursor.close()

    log.info("Resolved bottlenecks for %d prefixes", written)
    return written
