"""
CSV export of the power meter history.

Format (no quoting, values are always numeric):
  Time,Voltage(V),Current(mA),Power(mW)
  0,3.3,3.3,10.89
  0.1,...
"""

from pathlib import Path

CSV_HEADER = "Time,Voltage(V),Current(mA),Power(mW)"
CSV_FILENAME = "energy_simulation_data.csv"
CSV_MIMETYPE = "text/csv"


class ExportError(Exception):
    """Raised when the exported file cannot be written."""


def format_number(value):
    """Integral values print without a fraction: 0, not 0.0."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)


def sample_row(sample):
    return ",".join(format_number(v) for v in (
        sample.time, sample.voltage, sample.current_ma, sample.power_mw
    ))


def samples_to_csv(samples):
    """Header row followed by one row per sample, joined with newlines."""
    return "\n".join([CSV_HEADER] + [sample_row(s) for s in samples])


def export_csv(samples, path=None):
    """Write the CSV document to `path` and return it as a Path."""
    path = Path(path) if path is not None else Path(CSV_FILENAME)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(samples_to_csv(samples), encoding="utf-8")
    except OSError as e:
        raise ExportError(f"export failed: {e}") from e
    return path
