"""Process memory readings reported in envelopes and performance records."""

import sys

import psutil

_process = psutil.Process()


def memory_usage() -> int:
    """Resident set size of this process in bytes."""
    return int(_process.memory_info().rss)


def memory_peak() -> int:
    """Peak resident set size in bytes (current RSS where the OS has no peak)."""
    info = _process.memory_info()
    peak = getattr(info, "peak_wset", None)
    if peak is not None:
        return int(peak)
    if sys.platform != "win32":
        import resource

        max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        # Linux reports KiB, macOS bytes
        return int(max_rss if sys.platform == "darwin" else max_rss * 1024)
    return int(info.rss)
