import math

import pytest

from gridslam.sensors import OrientedPoint
from gridslam.stats import Covariance3, Gaussian3, compute_gaussian_from_samples


def test_covariance_addition():
    a = Covariance3(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
    b = Covariance3(0.5, 0.5, 0.5, -1.0, -1.0, -1.0)
    total = a + b
    assert (total.xx, total.yy, total.tt) == (1.5, 2.5, 3.5)
    assert (total.xy, total.xt, total.yt) == (3.0, 4.0, 5.0)


def test_zero_is_identity():
    a = Covariance3(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
    assert a + Covariance3.zero() == a
    assert Covariance3.zero() + a == a


def test_single_weighted_sample_is_the_mean():
    pose = OrientedPoint(2.0, -3.0, 0.7)
    g = compute_gaussian_from_samples([pose], [1.0])
    assert isinstance(g, Gaussian3)
    assert g.mean.x == pytest.approx(pose.x)
    assert g.mean.y == pytest.approx(pose.y)
    assert g.mean.theta == pytest.approx(pose.theta)
    assert g.cov.xx == pytest.approx(0.0)
    assert g.cov.tt == pytest.approx(0.0)


def test_symmetric_samples_mean_is_midpoint():
    poses = [OrientedPoint(1.0, 2.0, 0.0), OrientedPoint(3.0, 6.0, 0.0)]
    g = compute_gaussian_from_samples(poses, [1.0, 1.0])
    assert g.mean.x == pytest.approx((poses[0].x + poses[1].x) / 2)
    assert g.mean.y == pytest.approx((poses[0].y + poses[1].y) / 2)
    assert g.cov.xx > 0
    assert g.cov.xy > 0


def test_weight_scaling_does_not_change_result():
    poses = [OrientedPoint(0.0, 1.0, 0.1), OrientedPoint(2.0, -1.0, 0.3), OrientedPoint(5.0, 0.0, -0.2)]
    weights = [0.2, 0.5, 0.3]
    g1 = compute_gaussian_from_samples(poses, weights)
    g2 = compute_gaussian_from_samples(poses, [w * 3 for w in weights])
    assert g1.mean.x == pytest.approx(g2.mean.x)
    assert g1.mean.theta == pytest.approx(g2.mean.theta)
    assert g1.cov.yy == pytest.approx(g2.cov.yy)


def test_heading_mean_wraps_around():
    poses = [OrientedPoint(0.0, 0.0, 3.0), OrientedPoint(0.0, 0.0, -3.0)]
    g = compute_gaussian_from_samples(poses, [1.0, 1.0])
    assert abs(g.mean.theta) == pytest.approx(math.pi)
    assert g.cov.tt < 0.1


def test_unweighted_normaliser_counts_one_extra():
    pose = OrientedPoint(2.0, 4.0, 0.0)
    g = compute_gaussian_from_samples([pose])
    assert g.mean.x == pytest.approx(pose.x / 2)
    assert g.mean.y == pytest.approx(pose.y / 2)


def test_mismatched_weights_raise():
    with pytest.raises(ValueError):
        compute_gaussian_from_samples([OrientedPoint()], [1.0, 2.0])


def test_zero_total_weight_raises():
    with pytest.raises(ZeroDivisionError):
        compute_gaussian_from_samples([OrientedPoint(1.0, 1.0, 0.0)], [0.0])