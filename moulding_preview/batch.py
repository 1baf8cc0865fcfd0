"""
Batch conversion of DXF drawings into the profile store.

Provides:
- Folder-based batch conversion (DXF → profile JSON)
- Optional parallel processing (thread pool)
- Per-file error capture and a summary report

Usage:
    from moulding_preview.batch import batch_convert

    results = batch_convert("./drawings", profiles_dir="data/profiles", parallel=True)
    print(results.summary())
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from moulding_preview.io.converter import ConversionError, convert_dxf_file
from moulding_preview.io.dxf_reader import DxfReadError
from moulding_preview.project_config import ProjectConfig, load_config

logger = logging.getLogger(__name__)

# Stand-in file name for locating a config file in the input directory
CONFIG_PROBE = "batch.dxf"


@dataclass
class ConversionRecord:
    """Outcome of converting one drawing."""
    input_path: Path
    output_path: Optional[Path] = None
    profile_id: Optional[str] = None
    success: bool = False
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def status(self) -> str:
        return "OK" if self.success else "FAILED"


@dataclass
class BatchResult:
    records: List[ConversionRecord] = field(default_factory=list)
    total_duration_seconds: float = 0.0

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.records if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    def summary(self) -> str:
        lines = [
            "Batch Conversion Summary",
            "=" * 40,
            f"Total files:     {self.total}",
            f"Successful:      {self.successful}",
            f"Failed:          {self.failed}",
            f"Total time:      {self.total_duration_seconds:.1f}s",
        ]
        failures = [r for r in self.records if not r.success]
        if failures:
            lines.append("")
            lines.append("Failed files:")
            lines.extend(f"  - {r.input_path.name}: {r.error}" for r in failures)
        return "\n".join(lines)

    def to_dict(self) -> Dict:
        return {
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'total_duration_seconds': self.total_duration_seconds,
            'results': [
                {
                    'input': str(r.input_path),
                    'output': str(r.output_path) if r.output_path else None,
                    'profile_id': r.profile_id,
                    'success': r.success,
                    'error': r.error,
                    'duration': r.duration_seconds,
                }
                for r in self.records
            ],
        }


def find_dxf_files(input_dir: Union[str, Path], recursive: bool = False) -> List[Path]:
    """DXF files (any extension case) in a directory, sorted.

    Raises:
        FileNotFoundError: if the directory does not exist.
        NotADirectoryError: if the path is not a directory.
    """
    input_dir = Path(input_dir)
    if not input_dir.exists():
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    if not input_dir.is_dir():
        raise NotADirectoryError(f"Not a directory: {input_dir}")

    candidates = input_dir.rglob("*") if recursive else input_dir.glob("*")
    files = sorted(p for p in candidates if p.is_file() and p.suffix.lower() == ".dxf")
    logger.info("Found %d DXF files in %s", len(files), input_dir)
    return files


def convert_single_file(
    input_path: Path,
    profiles_dir: Path,
    config: ProjectConfig,
) -> ConversionRecord:
    """Convert one drawing, capturing failures in the record."""
    start_time = time.perf_counter()
    record = ConversionRecord(input_path=input_path)
    try:
        result = convert_dxf_file(
            input_path,
            profiles_dir,
            rotation=config.conversion.rotation,
            tolerance=config.conversion.tolerance,
        )
        record.success = True
        record.output_path = result.path
        record.profile_id = result.profile.id
    except (ConversionError, DxfReadError) as e:
        record.error = str(e)
        logger.error("Failed to convert %s: %s", input_path.name, e)
    record.duration_seconds = time.perf_counter() - start_time
    return record


def batch_convert(
    input_dir: Union[str, Path],
    profiles_dir: Optional[Union[str, Path]] = None,
    recursive: bool = False,
    config: Optional[ProjectConfig] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int, ConversionRecord], None]] = None,
) -> BatchResult:
    """Convert every DXF drawing in a folder into the profile store.

    Args:
        input_dir: directory containing DXF files.
        profiles_dir: store directory (default: config.store.profiles_dir).
        recursive: search subdirectories.
        config: project configuration (searched next to input_dir when None).
        parallel: convert on a thread pool.
        max_workers: thread pool size (None = executor default).
        progress_callback: called after each file with (done, total, record).

    Returns:
        BatchResult with one record per drawing, in input order.
    """
    start_time = time.perf_counter()
    input_dir = Path(input_dir)
    if config is None:
        config = load_config(input_path=input_dir / CONFIG_PROBE)
    store = Path(profiles_dir) if profiles_dir else Path(config.store.profiles_dir)

    files = find_dxf_files(input_dir, recursive)
    if not files:
        logger.warning("No DXF files found in %s", input_dir)
        return BatchResult(total_duration_seconds=time.perf_counter() - start_time)

    logger.info("Starting batch conversion: %d files, parallel=%s", len(files), parallel)
    records: Dict[Path, ConversionRecord] = {}

    def _done(record: ConversionRecord) -> None:
        records[record.input_path] = record
        if progress_callback:
            progress_callback(len(records), len(files), record)

    if parallel:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(convert_single_file, f, store, config) for f in files]
            for future in as_completed(futures):
                _done(future.result())
    else:
        for f in files:
            _done(convert_single_file(f, store, config))

    result = BatchResult(
        records=[records[f] for f in files],
        total_duration_seconds=time.perf_counter() - start_time,
    )
    logger.info("Batch complete: %d/%d converted in %.1fs",
                result.successful, result.total, result.total_duration_seconds)
    return result
