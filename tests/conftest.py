"""Shared test fixtures."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any

import pytest

from cfn_metrics_advisor.config import ENV_MAX_ALARMS
from cfn_metrics_advisor.models import Resource


def make_resource(resource_type: str, logical_id: str = "Res", **properties: Any) -> Resource:
    return Resource(logical_id=logical_id, type=resource_type, properties=properties)


@pytest.fixture(autouse=True)
def _clear_max_alarms_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_MAX_ALARMS, raising=False)


@pytest.fixture()
def rds_resource() -> Resource:
    return make_resource(
        "AWS::RDS::DBInstance",
        "Database",
        DBInstanceClass="db.t3.micro",
        Engine="mysql",
        BackupRetentionPeriod=7,
        MasterUsername="admin",
        MasterUserPassword="hunter2",
    )


@pytest.fixture()
def lambda_resource() -> Resource:
    return make_resource("AWS::Lambda::Function", "Handler", MemorySize=128, Runtime="python3.12")


@pytest.fixture()
def sample_template() -> dict[str, Any]:
    """A template mixing supported, refined-away and unsupported resources."""
    return {
        "AWSTemplateFormatVersion": "2010-09-09",
        "Resources": {
            "Database": {
                "Type": "AWS::RDS::DBInstance",
                "Properties": {
                    "DBInstanceClass": "db.t3.micro",
                    "Engine": "mysql",
                    "MasterUserPassword": "hunter2",
                },
            },
            "Bastion": {"Type": "AWS::EC2::Instance", "Properties": {"InstanceType": "t3.micro"}},
            "Handler": {
                "Type": "AWS::Lambda::Function",
                "Properties": {
                    "MemorySize": 512,
                    "Environment": {"Variables": {"API_TOKEN": "abc", "STAGE": "prod"}},
                },
            },
            "Ec2Service": {"Type": "AWS::ECS::Service", "Properties": {"LaunchType": "EC2"}},
            "WebService": {
                "Type": "AWS::ECS::Service",
                "Properties": {"LaunchType": "FARGATE", "DesiredCount": 3},
            },
            "Nlb": {
                "Type": "AWS::ElasticLoadBalancingV2::LoadBalancer",
                "Properties": {"Type": "network"},
            },
            "Table": {"Type": "AWS::DynamoDB::Table", "Properties": {"BillingMode": "PAY_PER_REQUEST"}},
        },
    }


@pytest.fixture()
def template_file(tmp_path: Path) -> Path:
    """A YAML template on disk using short-form intrinsic functions."""
    path = tmp_path / "stack.yaml"
    path.write_text(
        textwrap.dedent("""\
        AWSTemplateFormatVersion: "2010-09-09"
        Parameters:
          Env:
            Type: String
        Resources:
          Database:
            Type: AWS::RDS::DBInstance
            Properties:
              DBInstanceClass: db.m5.large
              Engine: postgresql
              DBName: !Ref Env
          Handler:
            Type: AWS::Serverless::Function
            Properties:
              MemorySize: 1024
              Role: !GetAtt HandlerRole.Arn
          HandlerRole:
            Type: AWS::IAM::Role
            Properties:
              RoleName: !Sub "${Env}-handler"
          Api:
            Type: AWS::ApiGateway::RestApi
            Properties:
              Name: !Join ["-", [!Ref Env, api]]
              Tags:
                - Key: Environment
                  Value: Production
        """)
    )
    return path


@pytest.fixture()
def tmp_repo(tmp_path: Path, template_file: Path) -> Path:
    """A directory tree with templates, non-CloudFormation files and excluded folders."""
    infra = tmp_path / "infra"
    infra.mkdir()
    (infra / "table.json").write_text(
        '{"Resources": {"Orders": {"Type": "AWS::DynamoDB::Table", '
        '"Properties": {"BillingMode": "PAY_PER_REQUEST"}}}}'
    )
    (tmp_path / "docker-compose.yml").write_text("services:\n  web:\n    image: nginx\n")
    (tmp_path / "broken.yaml").write_text("Resources: [unclosed\n")
    modules = tmp_path / "node_modules" / "pkg"
    modules.mkdir(parents=True)
    (modules / "template.yaml").write_text(
        "Resources:\n  Fn:\n    Type: AWS::Lambda::Function\n"
    )
    (tmp_path / "README.md").write_text("# infra\n")
    return tmp_path
