"""Tests for spline smoothing and knot selection."""
import numpy as np
import pytest


class TestSelectKnots:
    def test_even_spacing(self):
        from tram.smoother import select_knots
        assert select_knots(10, 4).tolist() == [0, 3, 6, 9]

    def test_centred_offset(self):
        from tram.smoother import select_knots
        # spacing 3, offset 1
        assert select_knots(12, 4).tolist() == [0, 4, 7, 11]

    def test_longer_series(self):
        from tram.smoother import select_knots
        assert select_knots(50, 6).tolist() == [0, 11, 20, 29, 38, 49]

    def test_every_point_a_knot(self):
        from tram.smoother import select_knots
        assert select_knots(5, 5).tolist() == [0, 1, 2, 3, 4]

    def test_strictly_increasing(self):
        from tram.smoother import select_knots
        for n in range(4, 60):
            for k in range(4, n + 1):
                idx = select_knots(n, k)
                assert len(idx) == k
                assert idx[0] == 0 and idx[-1] == n - 1
                assert np.all(np.diff(idx) > 0)


class TestSmoother:
    def test_endpoints_reproduced(self):
        from tram.smoother import Smoother
        xs = np.arange(1, 11, dtype=float)
        ys = np.array([-112, -54, -20, -4, 0, -2, -4, 0, 16, 50], dtype=float)
        s = Smoother(xs, ys, 4)
        assert s.value(1.0) == pytest.approx(-112.0)
        assert s.value(10.0) == pytest.approx(50.0)

    def test_endpoints_random_data(self):
        from tram.smoother import Smoother
        np.random.seed(42)
        for _ in range(20):
            n = np.random.randint(4, 40)
            k = np.random.randint(4, n + 1)
            xs = np.cumsum(np.random.rand(n) + 0.1)
            ys = np.random.randn(n) * 10
            s = Smoother(xs, ys, k)
            assert s.value(xs[0]) == pytest.approx(ys[0], abs=1e-9)
            assert s.value(xs[-1]) == pytest.approx(ys[-1], abs=1e-9)

    def test_passes_through_knots(self):
        from tram.smoother import Smoother
        np.random.seed(0)
        xs = np.arange(30, dtype=float)
        ys = np.random.randn(30)
        s = Smoother(xs, ys, 7)
        np.testing.assert_allclose(s.value(s.knots_x), s.knots_y, atol=1e-9)

    def test_linear_data_exact(self):
        from tram.smoother import Smoother
        xs = np.arange(20, dtype=float)
        ys = 2.0 * xs + 1.0
        s = Smoother(xs, ys, 5)
        np.testing.assert_allclose(s.value(xs), ys, atol=1e-9)

    def test_scalar_and_array_evaluation(self):
        from tram.smoother import Smoother
        xs = np.arange(10, dtype=float)
        s = Smoother(xs, xs ** 2, 4)
        assert isinstance(s.value(2.5), float)
        assert s(np.array([1.0, 2.0, 3.0])).shape == (3,)

    def test_outside_domain_is_nan(self):
        from tram.smoother import Smoother
        xs = np.arange(10, dtype=float)
        s = Smoother(xs, xs, 4)
        assert np.isnan(s.value(-1.0))
        assert np.isnan(s.value(9.5))
        assert s.domain == (0.0, 9.0)

    def test_accepts_lists(self):
        from tram.smoother import Smoother
        s = Smoother([0, 1, 2, 3], [0, 1, 2, 3], 4)
        assert s.value(1.5) == pytest.approx(1.5)


class TestSmootherErrors:
    def test_mismatched_lengths(self):
        from tram.smoother import Smoother
        from tram.errors import InvalidParameterError
        with pytest.raises(InvalidParameterError, match="same length"):
            Smoother(np.arange(10), np.arange(9), 4)

    def test_too_few_knots(self):
        from tram.smoother import Smoother
        from tram.errors import InvalidParameterError
        with pytest.raises(InvalidParameterError, match="at least 4"):
            Smoother(np.arange(10), np.arange(10), 3)

    def test_too_many_knots(self):
        from tram.smoother import Smoother
        from tram.errors import InvalidParameterError
        with pytest.raises(InvalidParameterError, match="greater than length"):
            Smoother(np.arange(10), np.arange(10), 11)

    def test_non_increasing_positions(self):
        from tram.smoother import Smoother
        from tram.errors import InvalidParameterError
        with pytest.raises(InvalidParameterError):
            Smoother(np.zeros(6), np.arange(6), 4)

    def test_is_value_error(self):
        from tram.smoother import Smoother
        with pytest.raises(ValueError):
            Smoother(np.arange(3), np.arange(3), 4)
