"""
GPX input/output for pytrackseg.

Reading flattens every track point of a GPX file into a DataFrame with
``lat``, ``lon``, ``ele`` and ``time`` columns in file order. Writing turns any
sample sequence (raw, averaged or filtered) back into a single-track GPX
document. Both directions use gpxpy.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import gpxpy
import gpxpy.gpx
import numpy as np
import pandas as pd
import polars as pl

from pytrackseg.exceptions import TraceExportError, TraceParseError
from pytrackseg.utilities.frames import require_columns, to_pandas_preserve

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

_COLUMNS = ["lat", "lon", "ele", "time"]


def read_gpx(path: PathLike) -> pd.DataFrame:
    """
    Parse a GPX file into an ordered sample DataFrame.

    Parameters
    ----------
    path : str or PathLike
        Location of the GPX file.

    Returns
    -------
    pd.DataFrame
        One row per track point, columns ``lat``, ``lon``, ``ele`` (NaN when the
        point has no elevation) and ``time`` (timezone-aware UTC, NaT when the
        point has no timestamp). Points of all tracks and segments are
        concatenated in document order. A file without track points gives an
        empty DataFrame with the same columns.

    Raises
    ------
    TraceParseError
        If the file cannot be opened, is not UTF-8 text or is not valid GPX.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            gpx = gpxpy.parse(f)
    except OSError as exc:
        raise TraceParseError(f"cannot read trace {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise TraceParseError(f"trace {path} is not UTF-8 encoded: {exc}") from exc
    except gpxpy.gpx.GPXException as exc:
        raise TraceParseError(f"malformed GPX in {path}: {exc}") from exc

    rows = []
    for track in gpx.tracks:
        for segment in track.segments:
            for point in segment.points:
                rows.append((
                    point.latitude,
                    point.longitude,
                    np.nan if point.elevation is None else point.elevation,
                    point.time,
                ))

    df = pd.DataFrame(rows, columns=_COLUMNS)
    df["lat"] = df["lat"].astype(float)
    df["lon"] = df["lon"].astype(float)
    df["ele"] = df["ele"].astype(float)
    df["time"] = pd.to_datetime(df["time"], utc=True)
    logger.info("Read %d trackpoints from %s", len(df), path)
    return df


def _to_python_datetime(value):
    if value is None or pd.isna(value):
        return None
    return pd.Timestamp(value).to_pydatetime()


def to_gpx(df: Union[pd.DataFrame, pl.DataFrame],
           title: Optional[str] = None,
           lat_col: str = "lat",
           lon_col: str = "lon",
           ele_col: str = "ele",
           time_col: str = "time") -> str:
    """
    Serialise a sample sequence as a GPX document with one track and one segment.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Samples in output order. Must contain the latitude and longitude
        columns; elevation and time are written when present.
    title : str, optional
        Track name.

    Returns
    -------
    str
        The GPX XML text.

    Raises
    ------
    TraceExportError
        If the frame lacks coordinates or a value cannot be serialised.
    """
    pdf, _ = to_pandas_preserve(df)
    try:
        require_columns(pdf, [lat_col, lon_col], "to_gpx")
    except ValueError as exc:
        raise TraceExportError(str(exc)) from exc

    has_ele = ele_col in pdf.columns
    has_time = time_col in pdf.columns

    gpx = gpxpy.gpx.GPX()
    track = gpxpy.gpx.GPXTrack(name=title)
    segment = gpxpy.gpx.GPXTrackSegment()
    track.segments.append(segment)
    gpx.tracks.append(track)

    try:
        lats = pdf[lat_col].to_numpy(dtype=float)
        lons = pdf[lon_col].to_numpy(dtype=float)
        eles = pdf[ele_col].to_numpy(dtype=float) if has_ele else None
        times = pd.to_datetime(pdf[time_col], utc=True) if has_time else None
        for i in range(len(pdf)):
            elevation = None
            if eles is not None and not np.isnan(eles[i]):
                elevation = float(eles[i])
            time = _to_python_datetime(times.iloc[i]) if times is not None else None
            segment.points.append(gpxpy.gpx.GPXTrackPoint(
                latitude=float(lats[i]),
                longitude=float(lons[i]),
                elevation=elevation,
                time=time,
            ))
        return gpx.to_xml()
    except (TypeError, ValueError, gpxpy.gpx.GPXException) as exc:
        raise TraceExportError(f"cannot serialise track {title!r}: {exc}") from exc


def product_path(input_path: PathLike, name: str) -> Path:
    """Sibling output path ``<input>.<name>.gpx`` for a named product."""
    input_path = Path(input_path)
    return input_path.with_name(f"{input_path.name}.{name}.gpx")


def write_products(products: Mapping[str, Union[pd.DataFrame, pl.DataFrame]],
                   input_path: PathLike) -> List[Path]:
    """
    Export every named product next to the input trace.

    All products are serialised in memory before the first file is touched,
    then each document is written to a temporary file and the temporary files
    are renamed into place. A serialisation or write failure therefore leaves
    no partially written product behind.

    Parameters
    ----------
    products : mapping of str to DataFrame
        Product name (used as file suffix) to sample sequence.
    input_path : str or PathLike
        The trace the products were derived from; its name is used as the
        track title and as the output file stem.

    Returns
    -------
    list of Path
        Written file paths, in the order of ``products``.

    Raises
    ------
    TraceExportError
        If any product fails to serialise or any file fails to write.
    """
    title = str(input_path)
    documents: Dict[Path, str] = {}
    for name, df in products.items():
        documents[product_path(input_path, name)] = to_gpx(df, title=title)

    staged: List[Path] = []
    try:
        for path, xml in documents.items():
            tmp = path.with_name(path.name + ".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(xml)
            staged.append(tmp)
        for tmp in staged:
            os.replace(tmp, tmp.with_name(tmp.name[:-len(".tmp")]))
    except OSError as exc:
        for tmp in staged:
            if tmp.exists():
                tmp.unlink()
        raise TraceExportError(f"cannot write products for {input_path}: {exc}") from exc

    written = list(documents)
    for path in written:
        logger.info("Wrote %s", path)
    return written
