"""Tests for cfn_metrics_advisor.renderer."""

import json
from pathlib import Path

import pytest

from cfn_metrics_advisor.analyzer import analyze_template
from cfn_metrics_advisor.config import Settings
from cfn_metrics_advisor.errors import OutputError
from cfn_metrics_advisor.models import AnalysisError, AnalysisResult
from cfn_metrics_advisor.parser import parse_template_text
from cfn_metrics_advisor.renderer import (
    alarm_logical_id,
    build_alarms,
    render,
    render_alarm_template,
    render_html,
    render_json,
    write_output,
)


@pytest.fixture()
def result(sample_template: dict) -> AnalysisResult:
    return analyze_template(sample_template, template_path="stack.yaml")


class TestJson:
    def test_round_trips_structure(self, result: AnalysisResult) -> None:
        data = json.loads(render_json(result))
        assert data["metadata"]["template_path"] == "stack.yaml"
        assert [r["logical_id"] for r in data["resources"]] == ["Database", "Handler", "WebService", "Table"]
        assert data["unsupported_resources"] == ["Bastion", "Ec2Service", "Nlb"]
        metric = data["resources"][0]["metrics"][0]
        assert metric["statistic"] in {"Average", "Sum", "Maximum", "Minimum"}
        assert metric["evaluation_period"] in {60, 300, 900, 3600}
        assert set(metric["threshold"]) == {"warning", "critical"}

    def test_redacted_values_in_output(self, result: AnalysisResult) -> None:
        assert "hunter2" not in render_json(result)


class TestHtml:
    def test_report_contents(self, result: AnalysisResult) -> None:
        html = render_html(result)
        assert "<html" in html
        assert "Database" in html
        assert "CPUUtilization" in html
        assert "Unsupported resources (3)" in html

    def test_empty_result(self) -> None:
        html = render_html(AnalysisResult())
        assert "No supported resources found" in html

    def test_values_are_escaped(self) -> None:
        r = AnalysisResult(
            errors=[AnalysisError(resource_id="Fn", resource_type="AWS::Lambda::Function", error="<script>x</script>")]
        )
        html = render_html(r)
        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html


class TestAlarmTemplate:
    def test_logical_id(self) -> None:
        assert alarm_logical_id("Table", "ReadThrottles.GlobalSecondaryIndexes", "Warning") == (
            "TableReadThrottlesGlobalSecondaryIndexesWarning"
        )
        assert len(alarm_logical_id("A" * 300)) == 255

    def test_two_alarms_per_metric(self, result: AnalysisResult) -> None:
        alarms = build_alarms(result)
        assert len(alarms) == 2 * result.metric_count
        ids = [a["logical_id"] for a in alarms]
        assert len(ids) == len(set(ids))
        assert "DatabaseCPUUtilizationWarningAlarm" in ids
        assert "DatabaseCPUUtilizationCriticalAlarm" in ids

    def test_duplicate_logical_ids_are_suffixed(self, result: AnalysisResult) -> None:
        doubled = result.model_copy(update={"resources": result.resources + result.resources[:1]})
        ids = [a["logical_id"] for a in build_alarms(doubled)]
        assert len(ids) == len(set(ids))
        assert "DatabaseCPUUtilizationWarningAlarm2" in ids

    def test_rendered_template_is_valid_cloudformation(self, result: AnalysisResult) -> None:
        template = parse_template_text(render_alarm_template(result))
        resources = template["Resources"]
        assert len(resources) == 2 * result.metric_count
        assert template["Description"] == "CloudWatch alarms recommended for stack.yaml"

        alarm = resources["DatabaseCPUUtilizationWarningAlarm"]
        assert alarm["Type"] == "AWS::CloudWatch::Alarm"
        props = alarm["Properties"]
        assert props["AlarmName"] == {"Fn::Sub": "${AWS::StackName}-Database-CPUUtilization-warning"}
        assert props["Namespace"] == "AWS/RDS"
        assert props["Dimensions"] == [{"Name": "DBInstanceIdentifier", "Value": "Database"}]
        assert props["Threshold"] == 35
        assert props["Period"] == 300
        assert props["ComparisonOperator"] == "GreaterThanOrEqualToThreshold"
        assert props["AlarmActions"] == {
            "Fn::If": ["HasAlarmTopic", [{"Ref": "AlarmTopicArn"}], {"Ref": "AWS::NoValue"}]
        }
        assert resources["DatabaseCPUUtilizationCriticalAlarm"]["Properties"]["Threshold"] == 46

    def test_lower_is_worse_operator(self, sample_template: dict) -> None:
        r = analyze_template(sample_template, Settings(honor_polarity=True))
        resources = parse_template_text(render_alarm_template(r))["Resources"]
        props = resources["WebServiceTaskCountCriticalAlarm"]["Properties"]
        assert props["ComparisonOperator"] == "LessThanOrEqualToThreshold"

    def test_empty_result_still_valid(self) -> None:
        template = parse_template_text(render_alarm_template(AnalysisResult()))
        assert list(template["Resources"]) == ["NoAlarmsPlaceholder"]


class TestDispatch:
    @pytest.mark.parametrize("fmt", ["json", "html", "yaml", "JSON"])
    def test_known_formats(self, result: AnalysisResult, fmt: str) -> None:
        assert render(result, fmt)

    def test_unknown_format(self, result: AnalysisResult) -> None:
        with pytest.raises(OutputError) as exc_info:
            render(result, "xml")
        assert exc_info.value.details["supportedFormats"] == ["html", "json", "yaml"]


class TestWriteOutput:
    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = write_output("{}", tmp_path / "out" / "nested" / "result.json")
        assert path.read_text() == "{}"

    def test_unwritable_path(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(OutputError, match="Failed to write"):
            write_output("{}", blocker / "result.json")
