"""Human readable formatting helpers."""


def human_size(value: int) -> str:
    """Format a byte count, e.g. ``10485760`` -> ``10.00 MB``."""
    size = float(max(value, 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.2f} {units[unit_idx]}"


def megabytes(value: int) -> str:
    """Byte count as a plain MB figure without trailing zeros, e.g. ``10`` or ``2.5``."""
    mb = value / (1024 * 1024)
    return f"{mb:g}"
