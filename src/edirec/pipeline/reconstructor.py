"""EDI L1A record reconstruction pipeline.

Turns a batch of raw L1A files into one ReconstructedRecord:
validate the batch, read every file, decode and align each file,
repair the flip flag, merge the files, and shape the record.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from edirec.contracts import ContractViolation, assert_record
from edirec.core.record import ReconstructedRecord
from edirec.core.status import BatchStatus
from edirec.core.timebase import TimeBaseGroup, epoch_dim
from edirec.errors import ReadFailure, ReconstructionError
from edirec.instrument.decoder import decode_correlator, decode_dwell, decode_energy
from edirec.instrument.filenames import DescriptorBatch, FileDescriptor, FileDescriptorResolver
from edirec.instrument.layout import GDUS, GroupLayout, raw_layout, rebased_channels
from edirec.instrument.reader import DatasetReader, ReadStatus, TimeWindow, XarrayDatasetReader
from edirec.instrument.versions import VersionPolicy
from edirec.pipeline.alignment import rebase_channels
from edirec.pipeline.assembler import RecordAssembler
from edirec.pipeline.flags import reconstruct_flags
from edirec.pipeline.merger import merge_groups
from edirec.schemas import InternalConfig

__all__ = ['RecordReconstructor']

logger = logging.getLogger(__name__)


class RecordReconstructor:
    """Reconstruct per-beam records from a batch of L1A files.

    **Pipeline:**

    1. **Resolve**: parse file names, check the batch is consistent, decide
       whether fast and slow survey files must be merged.

    2. **Version policy**: derive capability flags per file and reconcile
       them into one batch policy (energy units, flip flag, perp fields).

    3. **Read**: read every group of every file through the DatasetReader.
       Optional channels a file's version lacks are zero-filled. This is
       the only phase that may run in parallel (``reader.max_workers``).

    4. **Decode & align** (per file): energy codes to eV when the policy
       says so, dwell to seconds, correlator parameters to chip and code
       times; energy, dwell and pitch mode rebased onto each detector's
       per-beam cadence.

    5. **Flags** (per file, alternating mode only): flip marker pairs
       repaired.

    6. **Merge**: files concatenated and time-ordered per group.

    7. **Assemble**: counts shaped per mode; record contract enforced.

    Fatal problems raise a ReconstructionError subclass and abort the whole
    batch. Non-fatal findings end up in ``record.status``.

    Example usage::

        config = resolve_config(ParamConfig(), {"LOG_LEVEL": "DEBUG"})
        setup_logging(config)
        reconstructor = RecordReconstructor(config)
        record = reconstructor.reconstruct([
            "mms1_edi_fast_l1a_amb_20160101_v0.9.0.nc",
            "mms1_edi_slow_l1a_amb_20160101_v0.9.0.nc",
        ])
        ds = record.to_dataset()
    """

    def __init__(self, config: InternalConfig, reader: Optional[DatasetReader] = None):
        """Initialize with validated configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.

        reader : DatasetReader, optional
            Reader collaborator. Defaults to XarrayDatasetReader.
        """
        self.config = config
        self.reader = reader if reader is not None else XarrayDatasetReader()
        self.resolver = FileDescriptorResolver(config)
        self.assembler = RecordAssembler()

    def reconstruct(self, files: Union[str, Path, Iterable[Union[str, Path]]],
                    handles: Optional[Mapping[str, Any]] = None,
                    time_window: Optional[TimeWindow] = None) -> ReconstructedRecord:
        """Reconstruct one record from a batch of files.

        Parameters
        ----------
        files : path or iterable of paths
            File identifiers; their names carry the descriptor fields.
        handles : mapping, optional
            Already-open reader handles keyed by identifier (as given in
            ``files``). Files without a handle are opened and closed by
            the reader.
        time_window : (start, end), optional
            Inclusive tick window applied to every read.

        Returns
        -------
        ReconstructedRecord

        Raises
        ------
        ReconstructionError
            InconsistentBatch, UnknownVariant, InvalidFileName,
            VersionConflict, ReadFailure or NoRecords.
        ContractViolation
            If a stage broke its invariants (pipeline bug).
        """
        try:
            batch = self.resolver.resolve(files)
            policies = [VersionPolicy.for_version(d.version, self.config.versions) for d in batch.descriptors]
            policy = VersionPolicy.reconcile(policies, batch.alternating)

            status = BatchStatus(
                files=batch.paths,
                record_mode=batch.record_mode,
                merge_performed=batch.merge_required,
                version_notes=list(policy.notes),
            )

            raw = self._read_all(batch, policies, handles or {}, time_window, status)
            per_file = [
                self._transform_file(desc, groups, batch, policy, status)
                for desc, groups in zip(batch.descriptors, raw)
            ]
            merged = merge_groups(per_file)

            record = self.assembler.assemble(merged, batch, policy, status)
            assert_record(record, batch.burst)

        except ContractViolation as e:
            logger.critical("CRITICAL: Pipeline contract violated: %s", e)
            logger.critical("This indicates a bug in pipeline logic.")
            raise
        except ReconstructionError as e:
            logger.error("Batch aborted (%s): %s", type(e).__name__, e)
            raise

        logger.info("Reconstructed %r", record)
        if status.total_extrapolated:
            logger.warning("Batch extrapolated %d sample(s) in total", status.total_extrapolated)
        return record

    # ------------------------------------------------------------------
    # Read phase
    # ------------------------------------------------------------------

    def _read_all(self, batch: DescriptorBatch, policies, handles: Mapping[str, Any],
                  time_window: Optional[TimeWindow], status: BatchStatus) -> list:
        """Read every file; returns one ``{group: TimeBaseGroup}`` per file, in order."""
        layout = raw_layout(batch.burst)
        jobs = [(desc, policy, handles.get(desc.path)) for desc, policy in zip(batch.descriptors, policies)]

        def job(args):
            desc, file_policy, handle = args
            return self._read_file(desc, file_policy, handle, layout, time_window)

        workers = min(self.config.reader.max_workers, len(jobs))
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="edirec-read") as pool:
                results = list(pool.map(job, jobs))
        else:
            results = [job(args) for args in jobs]

        per_file = []
        for desc, (groups, defaulted) in zip(batch.descriptors, results):
            status.defaulted_channels.extend(f"{desc.stem}:{name}" for name in defaulted)
            per_file.append(groups)
        return per_file

    def _read_file(self, desc: FileDescriptor, policy: VersionPolicy, handle: Any,
                   layout: Mapping[str, GroupLayout], time_window: Optional[TimeWindow]) -> tuple:
        opened = handle is None
        if opened:
            try:
                handle = self.reader.open(desc.path)
            except (OSError, ValueError) as e:
                raise ReadFailure(desc.path, "*", f"cannot open: {e}") from e

        try:
            groups = {}
            defaulted = []
            for name, group_layout in layout.items():
                groups[name] = self._read_group(desc, policy, handle, name, group_layout,
                                                time_window, defaulted)
        finally:
            if opened:
                self.reader.close(handle)

        logger.debug(
            "Read %s: %s", desc.stem, ", ".join(f"{name}={len(group)}" for name, group in groups.items())
        )
        return groups, defaulted

    def _read_group(self, desc: FileDescriptor, policy: VersionPolicy, handle: Any, name: str,
                    layout: GroupLayout, time_window: Optional[TimeWindow], defaulted: list) -> TimeBaseGroup:
        dim = epoch_dim(name)
        ticks = None
        channels = {}

        for variable in layout.required + layout.optional:
            required = variable in layout.required
            if not required and not policy.provides(variable):
                continue

            result = self.reader.read(handle, variable, time_window)
            if result.status is ReadStatus.ABSENT and not required:
                logger.warning("%s: '%s' expected for %s but absent; zero-filled",
                               desc.stem, variable, desc.version_str)
                continue
            if result.status is not ReadStatus.OK:
                raise ReadFailure(desc.path, variable, result.message or result.status.value)
            if result.timebase != dim:
                raise ReadFailure(desc.path, variable,
                                  f"indexed by '{result.timebase}', expected '{dim}'")
            if ticks is None:
                ticks = result.timestamps
            channels[variable] = result.values

        group = TimeBaseGroup.from_arrays(name, ticks, channels)
        for variable in layout.optional:
            if variable not in group:
                group = group.with_channel(variable, policy.default_channel(variable, len(group)))
                defaulted.append(variable)
        return group

    # ------------------------------------------------------------------
    # Per-file transformation
    # ------------------------------------------------------------------

    def _transform_file(self, desc: FileDescriptor, groups: Mapping[str, TimeBaseGroup],
                        batch: DescriptorBatch, policy: VersionPolicy, status: BatchStatus) -> dict:
        """Decode, align and flag-repair one file's groups."""
        groups = dict(groups)
        timetag = self._decode_timetag(desc, groups["timetag"], policy)

        if "flip_flag" in timetag and batch.alternating and policy.has_flip_flag:
            repaired = reconstruct_flags(timetag["flip_flag"], alternating=True)
            attrs = dict(timetag.dataset["flip_flag"].attrs)
            timetag = (timetag.with_channel("flip_flag_raw", timetag["flip_flag"], attrs=attrs)
                       .with_channel("flip_flag", repaired.flags, attrs=attrs))
            status.flag_pairs += repaired.n_pairs
            status.dropped_markers += repaired.n_dropped
            status.clamped_markers += repaired.n_clamped
        groups["timetag"] = timetag

        for gdu in GDUS:
            beams = groups[gdu]
            if len(beams) and not len(timetag):
                raise ReadFailure(desc.path, epoch_dim("timetag"),
                                  f"no housekeeping samples to align {len(beams)} {gdu} record(s)")
            groups[gdu], alignment = rebase_channels(beams, timetag, rebased_channels(gdu))
            if alignment.n_extrapolated:
                status.add_extrapolation(desc.stem, gdu, timetag.name,
                                         alignment.n_before, alignment.n_after)
        return groups

    def _decode_timetag(self, desc: FileDescriptor, timetag: TimeBaseGroup,
                        policy: VersionPolicy) -> TimeBaseGroup:
        decoder = self.config.decoder
        try:
            if policy.needs_energy_decode:
                for gdu in GDUS:
                    timetag = timetag.with_channel(
                        f"energy_{gdu}", decode_energy(timetag[f"energy_{gdu}"], decoder.energy_table),
                        attrs={"units": "eV"},
                    )
            timetag = timetag.with_channel(
                "dwell", decode_dwell(timetag["dwell"], decoder.dwell_divisor), attrs={"units": "s"}
            )
            t_chip, t_code = decode_correlator(timetag["m"], timetag["n"], timetag["max_addr"],
                                               decoder.chip_counts, decoder.clock_hz)
        except ValueError as e:
            raise ReadFailure(desc.path, "timetag", f"undecodable telemetry: {e}") from e

        return (timetag.without(["m", "n", "max_addr"])
                .with_channel("t_chip", t_chip, attrs={"units": "s"})
                .with_channel("t_code", t_code, attrs={"units": "s"}))
