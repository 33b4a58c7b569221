"""Tests for cfn_metrics_advisor.classifier."""

import logging
from typing import Any

import pytest

from cfn_metrics_advisor import classifier
from cfn_metrics_advisor.classifier import (
    SUPPORTED_TYPES,
    classify_resources,
    is_application_load_balancer,
    is_fargate_service,
)
from cfn_metrics_advisor.models import Resource


def _ecs(**props: Any) -> Resource:
    return Resource(logical_id="Svc", type="AWS::ECS::Service", properties=props)


def _lb(**props: Any) -> Resource:
    return Resource(logical_id="Lb", type="AWS::ElasticLoadBalancingV2::LoadBalancer", properties=props)


class TestRefinementRules:
    @pytest.mark.parametrize(
        "props, expected",
        [
            ({"LaunchType": "FARGATE"}, True),
            ({"LaunchType": "EC2"}, False),
            ({}, False),
            ({"CapacityProviderStrategy": [{"CapacityProvider": "FARGATE", "Weight": 1}]}, True),
            ({"CapacityProviderStrategy": [{"CapacityProvider": "FARGATE_SPOT"}]}, True),
            ({"CapacityProviderStrategy": [{"CapacityProvider": "my-asg-provider"}]}, False),
            ({"CapacityProviderStrategy": []}, False),
            ({"CapacityProviderStrategy": {"Ref": "Strategy"}}, False),
        ],
    )
    def test_fargate(self, props: dict, expected: bool) -> None:
        assert is_fargate_service(_ecs(**props)) is expected

    @pytest.mark.parametrize(
        "props, expected",
        [
            ({}, True),
            ({"Type": "application"}, True),
            ({"Type": "network"}, False),
            ({"Type": "gateway"}, False),
        ],
    )
    def test_application_load_balancer(self, props: dict, expected: bool) -> None:
        assert is_application_load_balancer(_lb(**props)) is expected


class TestClassifyResources:
    def test_rds_and_ec2(self) -> None:
        result = classify_resources({
            "Db": {"Type": "AWS::RDS::DBInstance", "Properties": {"DBInstanceClass": "db.t3.micro"}},
            "Web": {"Type": "AWS::EC2::Instance", "Properties": {}},
        })
        assert [r.logical_id for r in result.supported] == ["Db"]
        assert result.unsupported_ids == ["Web"]
        assert result.total_count == 2
        assert result.elapsed_ms >= 0

    def test_sample_template_partition(self, sample_template: dict) -> None:
        result = classify_resources(sample_template["Resources"])
        assert result.supported_ids == ["Database", "Handler", "WebService", "Table"]
        assert result.unsupported_ids == ["Bastion", "Ec2Service", "Nlb"]
        assert len(result.supported) + len(result.unsupported_ids) == result.total_count == 7

    def test_sam_types_supported(self) -> None:
        result = classify_resources({
            "Fn": {"Type": "AWS::Serverless::Function"},
            "Api": {"Type": "AWS::Serverless::Api"},
        })
        assert result.supported_ids == ["Fn", "Api"]

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "AWS::Lambda::Function",
            {"Properties": {}},
            {"Type": 42},
            {"Type": {"Ref": "ResourceType"}},
        ],
    )
    def test_malformed_entries_are_unsupported(self, raw: Any) -> None:
        result = classify_resources({"Bad": raw, "Fn": {"Type": "AWS::Lambda::Function"}})
        assert result.unsupported_ids == ["Bad"]
        assert result.supported_ids == ["Fn"]
        assert result.total_count == 2

    @pytest.mark.parametrize("resources", [None, {}, [], "Resources"])
    def test_empty_or_invalid_input(self, resources: Any) -> None:
        result = classify_resources(resources)
        assert result.total_count == 0
        assert result.supported == []

    def test_properties_are_kept(self) -> None:
        result = classify_resources({"Fn": {"Type": "AWS::Lambda::Function", "Properties": {"MemorySize": 256}}})
        assert result.supported[0].properties == {"MemorySize": 256}

    def test_many_resources_single_pass(self) -> None:
        resources = {f"Fn{i}": {"Type": "AWS::Lambda::Function"} for i in range(500)}
        resources.update({f"Bucket{i}": {"Type": "AWS::S3::Bucket"} for i in range(500)})
        result = classify_resources(resources)
        assert len(result.supported) == 500
        assert len(result.unsupported_ids) == 500

    def test_supported_types(self) -> None:
        assert len(SUPPORTED_TYPES) == 8
        assert "AWS::Serverless::Api" in SUPPORTED_TYPES


class TestClassificationTiming:
    def test_over_budget_is_warned(
        self, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(classifier, "CLASSIFICATION_BUDGET_MS", -1.0)
        resources = {"Fn": {"Type": "AWS::Lambda::Function"}, "Bucket": {"Type": "AWS::S3::Bucket"}}
        with caplog.at_level(logging.WARNING, logger="cfn_metrics_advisor.classifier"):
            classify_resources(resources)
        warnings = [r for r in caplog.records if "Resource classification took" in r.getMessage()]
        assert len(warnings) == 1
        assert warnings[0].levelno == logging.WARNING
        assert "for 2 resources" in warnings[0].getMessage()
        assert "(budget -1 ms)" in warnings[0].getMessage()

    def test_within_budget_is_quiet(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="cfn_metrics_advisor.classifier"):
            classify_resources({"Fn": {"Type": "AWS::Lambda::Function"}})
        assert "Resource classification took" not in caplog.text
