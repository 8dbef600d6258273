# gridslam

Building blocks for grid-based FastSLAM: reading CARMEN-style robot logs,
describing laser and odometry sensors, particle filter resampling, weight
normalisation, occupancy cell statistics and pose Gaussians.

The package has no runtime dependencies beyond the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## What is inside

- `gridslam.sensors`: `OrientedPoint` (a pose with `+` and `-`),
  `Sensor`, `OdometrySensor`, `RangeSensor` with its list of `Beam`s and
  `update_beams_lookup()`, and the readings `SensorReading`,
  `OdometryReading` and `RangeReading`.
- `gridslam.configuration`: `CarmenConfiguration` is a dictionary from
  parameter name to its list of values. `load(stream)` reads the `PARAM`
  lines and the laser headers (`FLASER`, `RLASER`, `ROBOTLASER1`,
  `ROBOTLASER2`) of a log; `compute_sensor_map()` builds the odometry,
  sonar and laser sensors it describes, keyed by name. A sonar offset list
  too short for the stated number of sonars raises `ValueError`.
- `gridslam.sensorlog`: `parse_reading`, `parse_odometry` and `parse_range`
  turn log lines into readings. `SensorLog` loads every reading whose sensor
  is in the map; `bounding_box()` returns the first scan pose and
  `(xmin, ymin, xmax, ymax)`, where the lower y bound is taken from the last
  pose rather than the smallest one. `InputSensorStream` reads readings line
  by line from a text stream and cannot rewind; `LogSensorStream` replays a
  loaded log and can.
- `gridslam.commandline`: `CommandLineParser`, a small parser for
  `-name value` arguments with `add_flag`, `add_string`, `add_double` and
  `add_int`; `parse(argv, defaults)` returns a dictionary keyed by the option
  name without dashes, echoing each recognised option unless silent.
- `gridslam.particlefilter`: systematic resampling (`resample`,
  `UniformResampler`), effective sample size (`neff`), weight conversions
  (`to_normal_form`, `to_log_form`, `normalize`, `normalize_weights`),
  `repeat_indexes`, `repeat_indexes_into`, run-length encoding (`rle`), and
  the `Evolver` and `AuxiliaryEvolver` filter steps. Random draws come from
  an `rng` object with a `random()` method, so results can be made repeatable.
- `gridslam.weights`: `normalize_log_weights` turns particle log weights into
  normalised weights and the effective sample size; `needs_resampling`
  decides whether a resampling step is due.
- `gridslam.smmap`: `PointAccumulator`, the statistics kept in one cell of a
  scan-matcher occupancy map: hits, visits, mean hit point, occupancy
  (`float(cell)`, -1 when never visited) and entropy.
- `gridslam.stats`: `Covariance3`, `Gaussian3` and
  `compute_gaussian_from_samples` for fitting a pose Gaussian to weighted or
  unweighted samples.

## Reading a log

```python
from gridslam.configuration import CarmenConfiguration
from gridslam.sensorlog import SensorLog

with open("robot.log") as stream:
    configuration = CarmenConfiguration().load(stream)

sensor_map = configuration.compute_sensor_map()

with open("robot.log") as stream:
    log = SensorLog(sensor_map).load(stream)

start, (xmin, ymin, xmax, ymax) = log.bounding_box()
```

`gridslam.tools.load_log(path)` does both reading steps for a file in one
call.

## Commands

- `gridslam-log-test <logfile>` prints `x y theta time` for every range
  reading in a log.
- `gridslam-log-plot <logfile> | gnuplot` writes a gnuplot script that draws,
  for every third range scan, its points closer than 2 m as a GIF frame.
- `gridslam-rdk2carmen <logfile> [<outfile>]` writes every range reading with
  its ranges and position scaled from millimetres to metres, to the output
  file or to standard output.
- `gridslam-scanstudio2carmen <scanfile> <carmenfile>` converts a ScanStudio
  scan file into `FLASER` log lines.

## What it does not do

There is no mapping program here: the package has no scan matcher, no grid
map that scans are registered into, no motion model and no processor that
runs a full FastSLAM loop over a log. `gridslam.smmap` covers a single map
cell and `gridslam.weights` the weight step of such a filter. There is also
no viewer or other graphical display of particles or maps.