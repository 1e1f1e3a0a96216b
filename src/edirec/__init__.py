"""`edirec` - EDI record reconstruction.

Rebuilds time-aligned per-beam records from Electron Drift Instrument
L1A telemetry, reconciling files of differing telemetry rate and
software version.

Subpackages:
- schemas: Configuration models and resolution
- contracts: Stage invariants
- core: Time-base groups and the reconstructed record
- instrument: File names, version policy, decoding, dataset reading
- pipeline: Alignment, flag repair, merging, assembly, reconstructor
"""

__version__ = "0.1.0"
