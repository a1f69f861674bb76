# tests/core/test_health_predicate.py
"""
Tests for the node health predicate.
"""

from datetime import timedelta

import pytest

from nodeagent.core.health import evaluate, has_desired_gpu_count, is_node_ready
from nodeagent.models.node import ConditionStatus, NodeCondition, NodeSnapshot
from nodeagent.models.remediation import HealthVerdict


class TestIsNodeReady:
    def test_ready_true(self, make_node):
        assert is_node_ready(make_node(ready="True")) is True

    @pytest.mark.parametrize("status", ["False", "Unknown"])
    def test_ready_not_true(self, make_node, status):
        assert is_node_ready(make_node(ready=status)) is False

    def test_missing_ready_condition(self, make_node):
        """A node without any Ready condition is not ready."""
        node = make_node(ready=None, extra_conditions=(NodeCondition(type="MemoryPressure", status="False"),))
        assert is_node_ready(node) is False

    def test_duplicate_ready_conditions_use_first_occurrence(self, now):
        """The first Ready entry decides, even when a later duplicate is more recent."""
        node = NodeSnapshot(
            name="node-dup",
            conditions=(
                NodeCondition(type="Ready", status="False", last_transition_time=now - timedelta(hours=2)),
                NodeCondition(type="Ready", status="True", last_transition_time=now - timedelta(minutes=1)),
            ),
        )
        assert is_node_ready(node) is False

        node = NodeSnapshot(
            name="node-dup",
            conditions=(
                NodeCondition(type="Ready", status="True", last_transition_time=now - timedelta(hours=2)),
                NodeCondition(type="Ready", status="False", last_transition_time=now - timedelta(minutes=1)),
            ),
        )
        assert is_node_ready(node) is True


class TestHasDesiredGpuCount:
    def test_exact_match(self, make_node):
        assert has_desired_gpu_count(make_node(gpu=8), 8) is True

    @pytest.mark.parametrize("allocatable", [7, 9])
    def test_check_is_strict_equality(self, make_node, allocatable):
        """Neither fewer nor more GPUs than desired passes."""
        assert has_desired_gpu_count(make_node(gpu=allocatable), 8) is False

    def test_missing_gpu_fails_when_desired(self, make_node):
        assert has_desired_gpu_count(make_node(gpu=0), 1) is False

    @pytest.mark.parametrize("allocatable", [0, 1, 8, 16])
    def test_desired_zero_disables_check(self, make_node, allocatable):
        assert has_desired_gpu_count(make_node(gpu=allocatable), 0) is True


class TestEvaluate:
    def test_ready_without_gpu_check_is_healthy(self, make_node):
        assert evaluate(make_node(ready="True"), 0) == HealthVerdict.HEALTHY

    def test_ready_with_matching_gpu_is_healthy(self, make_node):
        assert evaluate(make_node(ready="True", gpu=8), 8) == HealthVerdict.HEALTHY

    def test_ready_with_wrong_gpu_count_is_unhealthy(self, make_node):
        assert evaluate(make_node(ready="True", gpu=7), 8) == HealthVerdict.UNHEALTHY

    def test_not_ready_with_matching_gpu_is_unhealthy(self, make_node):
        assert evaluate(make_node(ready="False", gpu=8), 8) == HealthVerdict.UNHEALTHY

    def test_missing_ready_condition_is_unhealthy(self, make_node):
        assert evaluate(make_node(ready=None), 0) == HealthVerdict.UNHEALTHY

    def test_condition_status_enum_accepts_strings(self):
        """Condition status strings from the API map onto the enum."""
        cond = NodeCondition(type="Ready", status="True")
        assert cond.status == ConditionStatus.TRUE
