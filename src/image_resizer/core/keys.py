"""Derivative key derivation and the reprocessing guard.

Both functions are pure and share one marker convention per configuration,
so that every key produced by :func:`derive_key` is recognised by
:func:`is_derivative`. That is what keeps a same-bucket deployment from
triggering itself forever.
"""

import posixpath

from .exceptions import InputError
from .models import MarkerStrategy, ObjectLocator, PipelineConfig


def _split_key(key: str):
    """Split ``key`` into (directory, stem, extension)."""
    directory, basename = posixpath.split(key)
    stem, extension = posixpath.splitext(basename)
    return directory, stem, extension


def is_derivative(key: str, config: PipelineConfig) -> bool:
    """
    Tell whether ``key`` names an object this pipeline produced.

    Args:
        key: Source object key
        config: Pipeline configuration holding the marker convention

    Returns:
        True when the key carries the derivative marker
    """
    marker = config.derivative_marker

    if config.marker_strategy is MarkerStrategy.INFIX:
        _, stem, _ = _split_key(key)
        return stem.endswith(marker)

    if config.destination_prefix and key.startswith(config.destination_prefix):
        return True
    return posixpath.basename(key).startswith(marker)


def derive_key(source_key: str, config: PipelineConfig) -> str:
    """
    Calculate the derivative key for ``source_key``.

    Infix mode inserts the marker before the extension of the basename
    (``foo/bar.jpg`` -> ``foo/bar_resized.jpg``). Prefix mode strips the
    source prefix, re-roots the key under the destination prefix and
    prepends the marker to the basename
    (``original-images/bar.jpg`` -> ``resized-images/resized__bar.jpg``).

    Raises:
        InputError: If the key has no basename (a folder placeholder)
    """
    directory, stem, extension = _split_key(source_key)
    if not stem and not extension:
        raise InputError(f"Key '{source_key}' has no object name to derive from")

    marker = config.derivative_marker

    if config.marker_strategy is MarkerStrategy.INFIX:
        return posixpath.join(directory, f"{stem}{marker}{extension}")

    if config.source_prefix and source_key.startswith(config.source_prefix):
        relative_key = source_key[len(config.source_prefix) :].lstrip("/")
    else:
        relative_key = source_key.lstrip("/")

    relative_dir, basename = posixpath.split(relative_key)
    return posixpath.join(
        config.destination_prefix, relative_dir, f"{marker}{basename}"
    )


def derive_destination(source: ObjectLocator, config: PipelineConfig) -> ObjectLocator:
    """Locate the derivative of ``source``, bucket included."""
    return ObjectLocator(
        bucket=config.destination_bucket_for(source.bucket),
        key=derive_key(source.key, config),
    )
