"""Shared configuration for template extraction.

This module centralizes the numeric constants used by:
    - vida_lib.templates (spiral anchor)
    - vida_lib.optimization (transformed-space boxes, optimizer defaults)
    - vida_lib.divergences (log floor)

It also provides configure_logging() for host applications and scripts.
"""

import logging
import math

# Box bounds in the unit-hypercube coordinate system
CUBE_LOWER = 0.0
CUBE_UPPER = 1.0

# Half-width of the box in the unconstrained (flat) coordinate system.
# Logistic maps saturate long before +/-20.
FLAT_BOUND = 20.0

# Flat-space starting points are clipped to +/-FLAT_START_BOUND, where the
# logistic map still has slope
FLAT_START_BOUND = 5.0

# Angle at which every log spiral arm is anchored (radius 1, arm start)
SPIRAL_ANCHOR_ANGLE = 10 * math.pi

# Floor applied before taking logs of normalized images
DIVERGENCE_FLOOR = 1e-12

# Nelder-Mead optimizer settings
NM_MAX_ITERATIONS = 2000
NM_X_TOLERANCE = 1e-6
NM_F_TOLERANCE = 1e-9

# Differential Evolution optimizer settings
DE_MAX_ITERATIONS = 100  # Maximum generations
DE_POPULATION_SIZE = 15  # Population size multiplier
DE_TOLERANCE = 1e-3  # Convergence tolerance

# Worker threads for multi-start extraction (None lets the executor decide)
DEFAULT_MAX_WORKERS = None

logger = logging.getLogger(__name__)


def configure_logging(level: str = 'INFO', log_file: str | None = None) -> None:
    """Configure application-wide logging.

    Sets up logging with a consistent format across all modules. Library
    modules only create loggers; call this once from the host application.

    Args:
        level: Log level string ('DEBUG', 'INFO', 'WARNING', 'ERROR').
        log_file: Optional path to log file. If None, logs to stderr only.

    Example:
        >>> from vida_lib.config import configure_logging
        >>> configure_logging(level='DEBUG')
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s %(levelname)-8s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger.info("Logging configured: level=%s, file=%s", level, log_file or 'stderr')
