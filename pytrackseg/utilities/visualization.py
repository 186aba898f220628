"""
Visualization module for pytrackseg.

This module provides functions to inspect pipeline products on interactive maps
using Folium, and elevation profiles with the detected intervals using matplotlib.
"""

from typing import Mapping, Optional, Union

import folium
import matplotlib
import numpy as np
import pandas as pd
import polars as pl
from matplotlib import pyplot as plt
from matplotlib.colors import rgb2hex

from pytrackseg.utilities.frames import require_columns, to_pandas_preserve


def products_map(
    products: Mapping[str, Union[pd.DataFrame, pl.DataFrame]],
    return_map: bool = False,
    show_legend: bool = True,
    legend_name: str = 'Products',
    show_in_browser: bool = True,
    cmap: str = 'tab10',
    lat_col: str = 'lat',
    lon_col: str = 'lon',
    tiles: str = "OpenStreetMap"
) -> Optional[folium.Map]:
    """
    Plot several named sample sequences on a single interactive Folium map.

    Each sequence is drawn as its own polyline layer with a color from ``cmap``,
    so e.g. the raw trace, the rough average and the climb product can be
    toggled and compared.

    Parameters
    ----------
    products : mapping of str to pd.DataFrame or pl.DataFrame
        Name to sequence, e.g. the ``products`` returned by ``process_trace``.
        Empty sequences are skipped.
    return_map : bool, default=False
        If True, returns the folium.Map object instead of displaying it.
    show_legend : bool, default=True
        If True, adds a legend box with product names and colors.
    legend_name : str, default='Products'
        The title of the legend box.
    show_in_browser : bool, default=True
        If True (and return_map is False), opens the map in the default web browser.
    cmap : str, default='tab10'
        Matplotlib colormap name for layer colors.
    lat_col, lon_col : str
        Coordinate columns in all sequences.
    tiles : str, default="OpenStreetMap"
        The map tile style.

    Returns
    -------
    folium.Map or None
        If return_map=True, returns the folium.Map object. Otherwise returns None.

    Raises
    ------
    ValueError
        If no sequence has coordinates, or one is missing the coordinate columns.

    Examples
    --------
    >>> products, intervals = process_trace(read_gpx('ride.gpx'))
    >>> products_map({'raw': raw, 'climb': products['climb']})
    """
    layers = []
    for name, df in products.items():
        pdf, _ = to_pandas_preserve(df)
        require_columns(pdf, [lat_col, lon_col], f"products_map ({name})")
        if len(pdf):
            layers.append((name, pdf[lat_col].to_numpy(dtype=float), pdf[lon_col].to_numpy(dtype=float)))

    if not layers:
        raise ValueError("No coordinates available to center the map.")

    # Center on the centroid of everything drawn
    all_lats = np.concatenate([lats for _, lats, _ in layers])
    all_lons = np.concatenate([lons for _, _, lons in layers])
    _map = folium.Map([float(np.nanmean(all_lats)), float(np.nanmean(all_lons))], zoom_start=15, tiles=tiles)

    _cmap = matplotlib.colormaps[cmap]
    items = []
    for count, (name, lats, lons) in enumerate(layers, start=1):
        color_ = rgb2hex(_cmap(count / max(1, len(layers))))
        layer = folium.FeatureGroup(name=name)
        folium.PolyLine(list(zip(lats, lons)), color=color_, weight=3, opacity=0.7, tooltip=name).add_to(layer)
        layer.add_to(_map)
        items.append((name, color_))

    if show_legend:
        legend_height = 25 * (len(items) + 1) + 20
        legend_html = f'''
             <div style="position: fixed;
             bottom: 50px; left: 50px; width: 220px; height: {legend_height}px;
             border:2px solid grey; z-index:9999; font-size:14px; background-color:white; padding: 10px;">
             &nbsp;<b>{legend_name}</b><br>
        '''
        for name, color in items:
            legend_html += f'&nbsp;<i class="fa fa-circle" style="color:{color}"></i>&nbsp;{name}<br>'
        legend_html += '</div>'
        _map.get_root().html.add_child(folium.Element(legend_html))

    folium.LayerControl().add_to(_map)

    if return_map:
        return _map
    if show_in_browser:
        _map.show_in_browser()
    return None


def elevation_profile(
    df: Union[pd.DataFrame, pl.DataFrame],
    intervals: Optional[Union[pd.DataFrame, pl.DataFrame]] = None,
    ax: Optional[plt.Axes] = None,
    ele_col: str = 'ele',
    second_col: str = 'second',
    show: bool = True
) -> plt.Axes:
    """
    Plot elevation over elapsed time, shading moving and climbing intervals.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Samples with elevation and elapsed seconds (e.g. the raw trace).
    intervals : pd.DataFrame or pl.DataFrame, optional
        Output of ``moving_intervals``. Moving intervals are shaded grey,
        climbing intervals orange.
    ax : matplotlib Axes, optional
        Axes to draw on; a new figure is created when omitted.
    ele_col, second_col : str
        Column names.
    show : bool, default=True
        Call ``plt.show()`` when done.

    Returns
    -------
    matplotlib Axes
        The axes drawn on. Save with ``ax.figure.savefig('profile.png')``.
    """
    pdf, _ = to_pandas_preserve(df)
    require_columns(pdf, [ele_col, second_col], "elevation_profile")

    if ax is None:
        _, ax = plt.subplots()

    seconds = pdf[second_col].to_numpy(dtype=float)
    origin = seconds[0] if len(seconds) else 0.0
    ax.plot(seconds - origin, pdf[ele_col].to_numpy(dtype=float), color='black', linewidth=1)

    if intervals is not None:
        ivs, _ = to_pandas_preserve(intervals)
        for row in ivs.itertuples(index=False):
            color = 'tab:orange' if row.is_climb else 'lightgrey'
            ax.axvspan(row.start_time - origin, row.end_time - origin, color=color, alpha=0.4)

    ax.set_xlabel('Elapsed time (s)')
    ax.set_ylabel('Elevation (m)')

    if show:
        plt.show()
    return ax
