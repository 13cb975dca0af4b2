"""Tests for notice models and component matching."""

import pytest

from cdk_notices.core.inventory import ModuleFact, ToolVersionFact
from cdk_notices.core.matcher import AffectedComponent, Notice, NoticeMatcher, is_applicable, matches
from cdk_notices.core.ranges import MalformedRangeError

from conftest import BASIC_NOTICE, MULTIPLE_AFFECTED_VERSIONS_NOTICE, notice


APIGW_ALPHA_API = ModuleFact(
    module_name="@aws-cdk/aws-apigatewayv2-alpha",
    module_version="2.12.0-alpha.0",
    construct_type_fqn="@aws-cdk/aws-apigatewayv2-alpha.HttpApi",
)
CFN_STAGE = ModuleFact(
    module_name="aws-cdk-lib",
    module_version="2.12.0",
    construct_type_fqn="aws-cdk-lib.aws_apigatewayv2.CfnStage",
)


class TestNoticeModel:
    """Test the Notice and AffectedComponent models."""

    def test_from_dict(self):
        """Test decoding a catalog entry."""
        result = notice(MULTIPLE_AFFECTED_VERSIONS_NOTICE)

        assert result.issue_number == 17061
        assert result.title == "Error when building EKS cluster with monocdk import"
        assert result.components == (AffectedComponent(name="cli", version="<1.130.0 >=1.126.0"),)
        assert result.schema_version == "1"

    def test_round_trip_preserves_json_shape(self):
        """Test that to_dict reproduces the catalog representation."""
        assert notice(BASIC_NOTICE).to_dict() == BASIC_NOTICE

    def test_immutable(self):
        """Test that notices cannot be modified."""
        result = notice(BASIC_NOTICE)
        with pytest.raises(AttributeError):
            result.title = "changed"

    @pytest.mark.parametrize("issue_number", [0, -5, "16603", None, True])
    def test_invalid_issue_number(self, issue_number):
        """Test that issue numbers must be positive integers."""
        with pytest.raises(ValueError):
            notice({**BASIC_NOTICE, "issueNumber": issue_number})

    def test_requires_components(self):
        """Test that a notice must list at least one component."""
        with pytest.raises(ValueError):
            notice({**BASIC_NOTICE, "components": []})
        with pytest.raises(ValueError):
            notice({**BASIC_NOTICE, "components": "cli"})

    def test_invalid_component(self):
        """Test that components need a name and a textual version."""
        with pytest.raises(ValueError):
            AffectedComponent.from_dict({"version": "<1.0.0"})
        with pytest.raises(ValueError):
            AffectedComponent.from_dict({"name": "cli", "version": 1})

    def test_version_range_is_parsed_on_demand(self):
        """Test that a bad range only fails when evaluated."""
        component = AffectedComponent(name="cli", version="whatever")
        with pytest.raises(MalformedRangeError):
            component.version_range


class TestCliComponent:
    """Test matching the `cli` component."""

    def test_matches_tool_version(self):
        """Test matching against the tool version fact."""
        component = AffectedComponent(name="cli", version="<=1.126.0")

        assert matches(component, ToolVersionFact("1.126.0"))
        assert not matches(component, ToolVersionFact("1.127.0"))

    def test_ignores_module_facts(self):
        """Test that cli never matches a module fact."""
        component = AffectedComponent(name="cli", version="<=9.0.0")
        assert not matches(component, ModuleFact("cli", "1.0.0"))


class TestFrameworkComponent:
    """Test matching the `framework` component."""

    def test_matches_core_library_v2(self):
        """Test matching aws-cdk-lib constructs."""
        component = AffectedComponent(name="framework", version="<=2.12.0")
        assert matches(component, ModuleFact("aws-cdk-lib", "2.12.0", "aws-cdk-lib.App"))

    def test_matches_core_library_v1(self):
        """Test matching @aws-cdk/core constructs."""
        component = AffectedComponent(name="framework", version="<= 2.1.0")
        assert matches(component, ModuleFact("@aws-cdk/core", "1.144.0", "@aws-cdk/core.App"))

    def test_version_outside_range(self):
        """Test that the core library version must satisfy the range."""
        component = AffectedComponent(name="framework", version="<= 2.1.0")
        assert not matches(component, ModuleFact("aws-cdk-lib", "2.12.0", "aws-cdk-lib.App"))

    def test_ignores_other_modules_and_tool(self):
        """Test that framework only matches the core library."""
        component = AffectedComponent(name="framework", version="<=9.0.0")

        assert not matches(component, APIGW_ALPHA_API)
        assert not matches(component, ToolVersionFact("1.0.0"))


class TestModuleComponent:
    """Test matching arbitrary module and construct names."""

    def test_trailing_dot_matches_constructs_in_module(self):
        """Test prefix matching on the construct fqn."""
        component = AffectedComponent(name="@aws-cdk/aws-apigatewayv2-alpha.", version="<= 2.13.0-alpha.0")
        assert matches(component, APIGW_ALPHA_API)

    def test_trailing_dot_matches_module_itself(self):
        """Test that a dotted name matches the bare module."""
        component = AffectedComponent(name="@aws-cdk/aws-apigatewayv2-alpha.", version="")
        assert matches(component, ModuleFact("@aws-cdk/aws-apigatewayv2-alpha", "2.12.0-alpha.0"))

    def test_trailing_dot_requires_segment_boundary(self):
        """Test that the dot is a path separator, not a plain prefix."""
        component = AffectedComponent(name="@aws-cdk/aws-apigateway.", version="")

        assert not matches(component, APIGW_ALPHA_API)
        assert matches(component, ModuleFact(
            "@aws-cdk/aws-apigateway", "1.0.0", "@aws-cdk/aws-apigateway.RestApi"
        ))

    def test_exact_module_name(self):
        """Test that a name without trailing dot needs exact equality."""
        exact = AffectedComponent(name="@aws-cdk/aws-apigatewayv2-alpha", version="")
        other = AffectedComponent(name="@aws-cdk/aws-apigateway", version="")

        assert matches(exact, APIGW_ALPHA_API)
        assert not matches(other, APIGW_ALPHA_API)

    def test_construct_level_match(self):
        """Test matching one specific construct type."""
        component = AffectedComponent(name="aws-cdk-lib.aws_apigatewayv2.CfnStage", version="<= 2.13.0-alpha.0")

        assert matches(component, CFN_STAGE)
        assert not matches(component, ModuleFact("aws-cdk-lib", "2.12.0", "aws-cdk-lib.aws_apigatewayv2.CfnApi"))

    def test_construct_prefix_without_dot_does_not_match(self):
        """Test that a construct name is not used as a prefix."""
        component = AffectedComponent(name="aws-cdk-lib.aws_apigatewayv2", version="")
        assert not matches(component, CFN_STAGE)

    def test_version_must_satisfy_range(self):
        """Test that a name match alone is not enough."""
        component = AffectedComponent(name="aws-cdk-lib.aws_apigatewayv2.CfnStage", version="<2.0.0")
        assert not matches(component, CFN_STAGE)

    def test_ignores_tool_version(self):
        """Test that module components never match the tool fact."""
        component = AffectedComponent(name="aws-cdk-lib", version="")
        assert not matches(component, ToolVersionFact("2.12.0"))

    def test_malformed_range_raises(self):
        """Test that a malformed range is not treated as a match."""
        component = AffectedComponent(name="aws-cdk-lib", version="2.12.0")
        with pytest.raises(MalformedRangeError):
            matches(component, CFN_STAGE)


class TestApplicability:
    """Test OR semantics across components and facts."""

    def test_any_component_any_fact(self):
        """Test that one matching pair is enough."""
        multi = Notice(
            issue_number=1,
            title="t",
            overview="o",
            components=(
                AffectedComponent(name="cli", version="<1.0.0"),
                AffectedComponent(name="aws-cdk-lib.aws_apigatewayv2.CfnStage", version=">=2.0.0"),
            ),
        )

        assert is_applicable(multi, [ToolVersionFact("1.5.0"), CFN_STAGE])
        assert not is_applicable(multi, [ToolVersionFact("1.5.0")])

    def test_validates_every_range(self):
        """Test that a malformed range is reported even if another component matches."""
        bad = Notice(
            issue_number=1,
            title="t",
            overview="o",
            components=(
                AffectedComponent(name="cli", version="<2.0.0"),
                AffectedComponent(name="framework", version="nope"),
            ),
        )
        with pytest.raises(MalformedRangeError):
            is_applicable(bad, [ToolVersionFact("1.0.0")])


class TestNoticeMatcher:
    """Test filtering a catalog."""

    def test_preserves_catalog_order(self):
        """Test that the filter is stable."""
        catalog = [notice(MULTIPLE_AFFECTED_VERSIONS_NOTICE), notice(BASIC_NOTICE)]
        result = NoticeMatcher().filter_notices(catalog, [ToolVersionFact("1.126.0")])

        assert [n.issue_number for n in result] == [17061, 16603]

    def test_excludes_acknowledged(self):
        """Test that acknowledged notices are dropped even when they match."""
        catalog = [notice(BASIC_NOTICE), notice(MULTIPLE_AFFECTED_VERSIONS_NOTICE)]
        result = NoticeMatcher().filter_notices(catalog, [ToolVersionFact("1.126.0")], [17061])

        assert [n.issue_number for n in result] == [16603]

    def test_skips_notice_with_malformed_range(self):
        """Test that one bad notice does not fail the batch."""
        bad = notice({**BASIC_NOTICE, "issueNumber": 1, "components": [{"name": "cli", "version": "bogus"}]})
        catalog = [bad, notice(BASIC_NOTICE)]

        result = NoticeMatcher().filter_notices(catalog, [ToolVersionFact("1.0.0")])

        assert [n.issue_number for n in result] == [16603]
