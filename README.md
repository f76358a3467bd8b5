# seisassoc

Building blocks for associating seismic phase picks into events. The package
is pure Python and needs nothing outside the standard library.

## Modules

### `seisassoc.bilinear`

`BilinearInterpolation` interpolates a function given on a rectangular grid.

- `initialize(x, y, f)` sets up a non-uniform grid. It needs at least two nodes
  on each axis, in increasing order.
- `initialize_uniform(x_limits, y_limits, nx, ny, f)` sets up a uniform grid.
- In both cases `f` is row major with `y` as the slow axis:
  `f[iy * nx + ix]` is the value at `(x[ix], y[iy])`.
- `interpolate(xq, yq)` returns a list of values. Query points outside the
  grid raise `ValueError`.
- `interpolate` raises `RuntimeError` before the interpolator is initialized.
- `is_initialized()` and `clear()` report and reset the state.

### `seisassoc.dbscan`

`DBSCAN` is a brute-force density clusterer.

- `initialize(epsilon, min_observations)` sets the neighbourhood radius and
  the minimum cluster size.
- `set_data(observations)` takes a list of numbers or of feature sequences.
- `set_weighted_data(observations, weights)` does the same with one positive
  weight per observation. A point is a core point when the summed weight
  within `epsilon` of it, itself included, reaches `min_observations`.
- `cluster()` runs the clustering. `labels()` then returns one label per
  observation, with `-1` for noise, and `number_of_clusters()` returns the
  count. Clusters are numbered from 0 in the order their first core point
  appears.
- `is_initialized()`, `have_data()` and `have_labels()` report the state.
  `clear()` resets it.

### `seisassoc.stations`

`HypoStation` reads a HypoDD-style station file that carries static
corrections.

- Degrees-and-minutes coordinates are read. Longitudes given positive west are
  stored positive east.
- Only the first line for each network/station is kept.
- `position(network, station)` returns `(latitude, longitude, elevation)`. It
  raises `KeyError` for an unknown station.
- `p_correction`, `s_correction` and `correction(network, station, phase)`
  return the static correction in seconds. They return 0 and log a warning
  for an unknown station.

`is_blacklisted(network, station)` and `is_collocated(network, station)` flag
stations with known timing issues, and collocated stations that can yield
duplicate picks.

### `seisassoc.corrections`

- `parse_pick_line(line, heuristic_weight=True, p_modeling_error=0.1,
  s_modeling_error=0.2)` parses one NonLinLoc observation line into a
  `PhasePick`. It returns `None` for a blacklisted station.
  - The pick time is in UTC epoch seconds.
  - The first motion becomes a `Polarity`.
  - The standard deviation is that of a uniform distribution. Its width is
    either a heuristic, or the line's error plus a modelling error.
- `remove_duplicate_picks(picks, ptol=0.2, stol=0.4)` drops duplicate picks on
  different channels of collocated stations. A known polarity is preferred,
  then a high-gain channel over a strong-motion one.
- `StaticCorrections` reads a `network,station,phase,correction` CSV into
  `StaticCorrection` records. `correction(network, station, phase)` returns
  the first match, or 0.

### `seisassoc.tables`

- `read_growclust_table(path, phase_label)` reads a layered travel-time table
  into a `TravelTimeInterpolator`. Its `time(offset, depth)` and
  `times(offsets, depths)` interpolate bilinearly, with offset and depth in km.
- `read_receivers_csv(path, have_header=True)` and `read_receivers_nodal(path)`
  read unique `Receiver`s. Two receivers are equal when network and station
  match. Blacklisted nodes are skipped.
- `create_grid(...)` builds a regular latitude/longitude/depth grid, with depth
  varying fastest.
- `create_source_points()` builds the fixed candidate source set. It joins a
  coarse regional grid, one point at Bingham and a finer grid. Both grid
  functions return a `GridPoints` named tuple.
- `compute_distances(receiver_latitude, receiver_longitude, source_latitudes,
  source_longitudes)` returns WGS84 geodesic distances in kilometres.

## What the package does not do

- There is no associator that runs the clustering over picks to produce
  events.
- Travel-time tables cannot be saved to or loaded from an archive file.
- There is no command-line program.

These pieces are meant to be combined by your own code.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from seisassoc.bilinear import BilinearInterpolation
from seisassoc.dbscan import DBSCAN

interp = BilinearInterpolation()
interp.initialize([0.0, 1.0], [0.0, 1.0], [0.0, 1.0, 2.0, 3.0])
print(interp.interpolate([0.5], [0.5]))   # [1.5]

clusterer = DBSCAN()
clusterer.initialize(epsilon=0.5, min_observations=2)
clusterer.set_data([0.0, 0.1, 5.0, 5.2, 20.0])
clusterer.cluster()
print(clusterer.number_of_clusters(), clusterer.labels())   # 2 [0, 0, 1, 1, -1]
```