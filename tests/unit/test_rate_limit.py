"""Tests for rate limiting utilities."""

from __future__ import annotations

from unittest.mock import patch

from kubernetes.client.exceptions import ApiException

from cluster_status_operator.utils import rate_limit
from cluster_status_operator.utils.rate_limit import (
    handle_rate_limit_error,
    is_rate_limit_error,
    rate_limit_k8s,
)


class TestRateLimitK8s:
    """Test cases for the call spacing decorator."""

    def test_passes_through_arguments_and_result(self):
        @rate_limit_k8s
        def call(a, b=None):
            return (a, b)

        assert call(1, b=2) == (1, 2)

    def test_sleeps_when_called_too_fast(self):
        with patch.object(rate_limit, "_K8S_RATE_LIMIT_PER_SECOND", 1.0), \
                patch.object(rate_limit, "_k8s_last_call_time", 0.0), \
                patch("cluster_status_operator.utils.rate_limit.time") as mock_time:
            mock_time.time.side_effect = [100.5, 100.5]
            rate_limit_k8s(lambda: None)()

            mock_time.sleep.assert_not_called()

            mock_time.time.side_effect = [101.2, 101.5]
            rate_limit_k8s(lambda: None)()

            sleep_time = mock_time.sleep.call_args[0][0]
            assert abs(sleep_time - 0.3) < 1e-9


class TestRateLimitErrors:
    """Test cases for throttling detection and backoff."""

    def test_is_rate_limit_error(self):
        assert is_rate_limit_error(ApiException(status=429, reason="Too Many Requests")) is True
        assert is_rate_limit_error(ApiException(status=503, reason="rate limit exceeded")) is True
        assert is_rate_limit_error(ApiException(status=503, reason="Service Unavailable")) is False
        assert is_rate_limit_error(ApiException(status=500, reason="Boom")) is False
        assert is_rate_limit_error(ValueError("429")) is False

    @patch("cluster_status_operator.utils.rate_limit.metrics")
    @patch("cluster_status_operator.utils.rate_limit.time.sleep")
    def test_backoff_is_exponential(self, mock_sleep, mock_metrics):
        error = ApiException(status=429, reason="Too Many Requests")

        assert handle_rate_limit_error(error, 0) is True
        assert handle_rate_limit_error(error, 2) is True

        assert [call[0][0] for call in mock_sleep.call_args_list] == [1, 4]
        mock_metrics.rate_limit_hits_total.labels.assert_called_with(api_type="k8s")

    @patch("cluster_status_operator.utils.rate_limit.time.sleep")
    def test_gives_up_after_max_retries(self, mock_sleep):
        error = ApiException(status=429, reason="Too Many Requests")

        assert handle_rate_limit_error(error, 3) is False
        mock_sleep.assert_not_called()

    @patch("cluster_status_operator.utils.rate_limit.time.sleep")
    def test_other_errors_not_retried(self, mock_sleep):
        assert handle_rate_limit_error(ApiException(status=500, reason="Boom"), 0) is False
        mock_sleep.assert_not_called()
