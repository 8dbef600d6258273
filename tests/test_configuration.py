import io
import math

import pytest

from gridslam.configuration import CarmenConfiguration, Configuration
from gridslam.sensors import OdometrySensor, RangeSensor


def _load(text):
    conf = CarmenConfiguration()
    conf.load(io.StringIO(text))
    return conf


def _thetas(sensor):
    return [beam.pose.theta for beam in sensor.beams]


def test_configuration_is_abstract():
    with pytest.raises(TypeError):
        Configuration()


def test_empty_config_has_only_odometry():
    sensors = _load("").compute_sensor_map()
    assert sorted(sensors) == ["ODOM", "TRUEPOS"]
    assert isinstance(sensors["TRUEPOS"], OdometrySensor)
    assert sensors["TRUEPOS"].ideal is True
    assert sensors["ODOM"].ideal is False


def test_param_lines_are_collected():
    conf = _load("PARAM robot_max_sonar 5 extra\nPARAM robot_num_sonars 2\nODOM 1 2 3\n")
    assert conf["robot_max_sonar"] == ["5", "extra"]
    assert conf["robot_num_sonars"] == ["2"]


def test_first_param_wins():
    conf = _load("PARAM a 1\nPARAM a 2\n")
    assert conf["a"] == ["1"]


def test_load_clears_previous_content():
    conf = _load("PARAM a 1\n")
    conf.load(io.StringIO("PARAM b 2\n"))
    assert "a" not in conf
    assert conf["b"] == ["2"]


def test_flaser_line_enables_front_lasers():
    conf = _load("FLASER 180 1 2 3\n")
    assert conf["laser_beams"] == ["180"]
    assert conf["robot_use_laser"] == ["on"]
    sensors = conf.compute_sensor_map()
    assert sorted(sensors) == ["FLASER", "ODOM", "ROBOTLASER1", "TRUEPOS"]
    flaser = sensors["FLASER"]
    assert isinstance(flaser, RangeSensor)
    assert flaser.new_format is False
    assert sensors["ROBOTLASER1"].new_format is True
    assert len(flaser.beams) == 180
    assert all(beam.max_range == 50 for beam in flaser.beams)


def test_even_fan_is_symmetric_and_increasing():
    flaser = _load("FLASER 180\n").compute_sensor_map()["FLASER"]
    thetas = _thetas(flaser)
    n = len(thetas)
    for i in range(n):
        assert thetas[i] == pytest.approx(-thetas[n - 1 - i])
    assert all(a < b for a, b in zip(thetas, thetas[1:]))
    assert thetas[1] - thetas[0] == pytest.approx(math.radians(1.0))
    assert thetas[0] == pytest.approx(-math.pi / 2)
    assert 0.0 not in thetas


def test_odd_fan_has_centre_beam():
    flaser = _load("FLASER 181\n").compute_sensor_map()["FLASER"]
    thetas = _thetas(flaser)
    assert len(thetas) == 181
    assert thetas[90] == 0.0
    for i in range(181):
        assert thetas[i] == pytest.approx(-thetas[180 - i])


def test_beam_lookup_is_updated():
    flaser = _load("FLASER 361\n").compute_sensor_map()["FLASER"]
    for beam in flaser.beams:
        assert math.atan2(beam.s, beam.c) == pytest.approx(beam.pose.theta)
    assert flaser.beams[1].pose.theta - flaser.beams[0].pose.theta == pytest.approx(math.radians(0.5))


def test_hokuyo_ranges_differ_between_front_lasers():
    sensors = _load("FLASER 769\n").compute_sensor_map()
    assert sensors["FLASER"].beams[0].max_range == 4.1
    assert sensors["ROBOTLASER1"].beams[0].max_range == 50
    sensors = _load("FLASER 683\n").compute_sensor_map()
    assert sensors["FLASER"].beams[0].max_range == 5.5
    assert sensors["ROBOTLASER1"].beams[0].max_range == 5.5


def test_682_uses_resolution_parameter_for_robotlaser1():
    text = "FLASER 682\nPARAM laser_front_laser_resolution 2\n"
    sensors = _load(text).compute_sensor_map()
    flaser, robot = sensors["FLASER"], sensors["ROBOTLASER1"]
    assert flaser.beams[0].max_range == 4.1
    assert flaser.beams[1].pose.theta - flaser.beams[0].pose.theta == pytest.approx(math.radians(360 / 1024))
    assert robot.beams[0].max_range == 50
    assert robot.beams[1].pose.theta - robot.beams[0].pose.theta == pytest.approx(math.radians(2.0))


def test_robotlaser1_line_reads_beam_count():
    conf = _load("ROBOTLASER1 0 -1.57 3.14 0.0174 81.9 0.01 0 361 1 2\n")
    assert conf["laser_beams"] == ["361"]
    assert len(conf.compute_sensor_map()["ROBOTLASER1"].beams) == 361


def test_param_off_is_not_overridden_by_laser_line():
    sensors = _load("PARAM robot_use_laser off\nFLASER 180\n").compute_sensor_map()
    assert "FLASER" not in sensors
    assert "ROBOTLASER1" not in sensors


def test_front_offset_applies_to_both_front_lasers():
    text = "PARAM robot_use_laser on\nPARAM robot_frontlaser_offset 0.25\n"
    sensors = _load(text).compute_sensor_map()
    assert sensors["FLASER"].pose.x == 0.25
    assert sensors["ROBOTLASER1"].pose.x == 0.25
    assert len(sensors["FLASER"].beams) == 180


def test_rear_lasers():
    text = "RLASER 180\nPARAM robot_rearlaser_offset 0.3\n"
    sensors = _load(text).compute_sensor_map()
    rlaser, robot2 = sensors["RLASER"], sensors["ROBOTLASER2"]
    assert rlaser.pose.theta == math.pi
    assert rlaser.pose.x == 0.3
    assert robot2.pose.x == 0.0
    assert robot2.pose.theta == math.pi
    assert rlaser.beams[0].max_range == 89
    assert robot2.beams[0].max_range == 50
    assert robot2.new_format is True


def test_sonar_ring():
    text = (
        "PARAM robot_use_sonar on\n"
        "PARAM robot_max_sonar 5\n"
        "PARAM robot_num_sonars 2\n"
        "PARAM robot_sonar_offsets 0.1 0.2 0.3 0.4 0.5 0.6\n"
    )
    sonar = _load(text).compute_sensor_map()["SONAR"]
    assert len(sonar.beams) == 2
    assert sonar.beams[1].pose.x == 0.4
    assert sonar.beams[1].pose.y == 0.5
    assert sonar.beams[1].pose.theta == 0.6
    assert all(beam.max_range == 5.0 for beam in sonar.beams)
    assert sonar.beams[0].span == pytest.approx(math.radians(7.5))


def test_sonar_without_offsets_has_no_beams():
    text = "PARAM robot_use_sonar on\nPARAM robot_num_sonars 4\n"
    sonar = _load(text).compute_sensor_map()["SONAR"]
    assert sonar.beams == []


def test_sonar_with_too_few_offsets_raises():
    text = (
        "PARAM robot_use_sonar on\n"
        "PARAM robot_num_sonars 3\n"
        "PARAM robot_sonar_offsets 0.1 0.2 0.3 0.4 0.5 0.6\n"
    )
    with pytest.raises(ValueError):
        _load(text).compute_sensor_map()