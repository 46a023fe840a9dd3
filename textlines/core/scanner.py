from __future__ import annotations

import fnmatch
import logging
import time
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from tqdm import tqdm

from .buffer import INITIAL_BUFFER_SIZE
from .detect import guess_charset
from .models import Encoding, FileReport
from .reader import DEFAULT_LOGGER_NAME, open_textfile

DEFAULT_EXCLUDE_DIRS = (".git", ".venv", "node_modules", "venv", ".tox", ".mypy_cache", ".pytest_cache", "__pycache__")
SLOW_INSPECT_THRESHOLD_SECONDS = 2.0


def configure_logging(verbose: bool = False, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Configure and return the package logger.

    Script usage rarely calls ``logging.basicConfig``, so a stream handler is
    attached once when the logger has none. ``verbose`` lowers the level from
    WARNING to INFO.
    """

    logger = logging.getLogger(logger_name)
    level = logging.INFO if verbose else logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger


def iter_paths(
    paths: Iterable[Path],
    include_globs: Optional[List[str]] = None,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> Iterator[Path]:
    """Yield files named on the command line and files found below directories.

    Files given explicitly are always yielded; the include globs only filter
    what a directory walk discovers.
    """
    patterns = include_globs or ["*"]
    excluded = set(exclude_dirs)
    for root in paths:
        if not root.is_dir():
            yield root
            continue
        for p in sorted(root.rglob("*")):
            if p.is_dir():
                continue
            if excluded.intersection(p.relative_to(root).parts[:-1]):
                continue
            if any(fnmatch.fnmatch(p.name, pat) for pat in patterns):
                yield p


class FileInspector:
    """Builds a :class:`FileReport` for each file, one file at a time."""

    def __init__(
        self,
        *,
        count_lines: bool = False,
        initial_capacity: int = INITIAL_BUFFER_SIZE,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
        show_progress: bool = True,
        progress_desc: str = "Inspecting files",
    ) -> None:
        self.count_lines = count_lines
        self.initial_capacity = initial_capacity
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)
        self.show_progress = bool(show_progress)
        self.progress_desc = progress_desc
        self._slow_log_threshold = SLOW_INSPECT_THRESHOLD_SECONDS

    def inspect_all(self, paths: List[Path]) -> List[FileReport]:
        total = len(paths)
        if self.verbose:
            self.logger.info("Inspecting %d file(s)", total)

        reports: List[FileReport] = []
        progress_bar = None
        if self.show_progress and total > 1:
            progress_bar = tqdm(total=total, desc=self.progress_desc, unit="file")
        try:
            for path in paths:
                if progress_bar is not None:
                    progress_bar.set_postfix_str(_short_label(str(path)), refresh=False)
                reports.append(self.inspect(path))
                if progress_bar is not None:
                    progress_bar.update(1)
        finally:
            if progress_bar is not None:
                progress_bar.close()
        return reports

    def inspect(self, path: Path) -> FileReport:
        report = FileReport(path=path)
        start_time = time.perf_counter()
        textfile = open_textfile(path, initial_capacity=self.initial_capacity, logger=self.logger)
        if textfile is None:
            report.error = "unable to open"
            return report

        with textfile:
            report.encoding = textfile.encoding
            report.newline = textfile.newline
            if textfile.encoding is Encoding.UTF8:
                report.charset_hint = guess_charset(textfile.sample)
            if self.count_lines and textfile.is_supported:
                report.line_count = sum(1 for _ in textfile)
                report.meta["buffer_capacity"] = textfile.capacity

        duration = time.perf_counter() - start_time
        if self.verbose:
            self.logger.info(
                "Inspected %s: %s / %s", path, report.encoding.label, report.newline.label
            )
        if duration >= self._slow_log_threshold and self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("Slow inspection for %s took %.2fs", path, duration)
        return report


def _short_label(label: str) -> str:
    if len(label) > 60:
        return f"...{label[-57:]}"
    return label
