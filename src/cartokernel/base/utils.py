"""
utils.py

Small helpers shared across the kernel: logging setup for command-line use and
a KD-tree builder, used by the nearest-feature search, that returns None on bad input.

The public helpers:
- `configure_logging(level=logging.INFO, log_file=None)` : attach handlers to the package logger
- `safe_build_kdtree(points, name='KDTree')` : returns a cKDTree or None

"""

from typing import Any, Optional
import os
import sys
import logging
import numpy as np

logger = logging.getLogger(__name__)

LOG_FORMAT = '[%(levelname)s] %(message)s'
FILE_LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
	"""Attach a stdout handler (and optionally a file handler) to the `cartokernel` logger.

	Safe to call repeatedly: handlers are only added once. The file handler is
	created with `delay=True` so the file is not opened until the first record.
	"""
	log = logging.getLogger('cartokernel')
	if not any(getattr(h, '_cartokernel', False) for h in log.handlers):
		h = logging.StreamHandler(sys.stdout)
		h.setFormatter(logging.Formatter(LOG_FORMAT))
		h._cartokernel = True
		log.addHandler(h)
	if log_file is not None and not any(
			isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
			for h in log.handlers):
		fh = logging.FileHandler(log_file, delay=True)
		fh.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
		log.addHandler(fh)
	log.setLevel(level)
	for h in log.handlers:
		h.setLevel(level)
	return log


def safe_build_kdtree(points: Any, name: str = 'KDTree'):
	"""Build a scipy cKDTree from (N, 2) points, or return None.

	None is returned for missing or empty input and for arrays scipy rejects;
	callers fall back to brute-force search in that case.
	"""
	if points is None:
		logger.debug('%s: points is None, not building tree', name)
		return None
	pts = np.asarray(points, dtype=float)
	if pts.size == 0:
		logger.debug('%s: points empty, not building tree', name)
		return None
	from scipy.spatial import cKDTree
	try:
		return cKDTree(pts)
	except (ValueError, TypeError, IndexError):
		logger.exception('%s: failed to build cKDTree for provided points', name)
		return None


__all__ = ['configure_logging', 'safe_build_kdtree']
