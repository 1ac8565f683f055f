"""
Tests for fuzzy system configuration models and the configuration loader.
"""

import pytest

from loanrisk.config import get_engine_settings
from loanrisk.errors import (
    ConfigurationError,
    ConfigurationFileError,
    InvalidConfigurationError,
)
from loanrisk.fuzzy.config import (
    FuzzyConfigLoader,
    FuzzySystemConfig,
    TrapezoidalSetConfig,
    TriangularSetConfig,
    VariableConfig,
)
from loanrisk.fuzzy.model import Clause


class TestSetConfigs:
    def test_trapezoidal(self):
        config = TrapezoidalSetConfig(parameters=[0, 1, 2, 3])
        assert config.type == "trapezoidal"
        assert config.as_trapezoid() == [0, 1, 2, 3]

    def test_triangular_expands_to_trapezoid(self):
        config = TriangularSetConfig(parameters=[30, 50, 70])
        assert config.as_trapezoid() == [30, 50, 50, 70]

    def test_bad_ordering(self):
        with pytest.raises(ConfigurationError) as exc_info:
            TrapezoidalSetConfig(parameters=[0, 3, 2, 4])
        assert exc_info.value.error_code == "CONFIG-InvalidParameterOrder"

        with pytest.raises(ConfigurationError) as exc_info:
            TriangularSetConfig(parameters=[50, 30, 70])
        assert exc_info.value.error_code == "CONFIG-InvalidParameterOrder"


class TestVariableConfig:
    def test_shorthand_sets(self):
        config = VariableConfig(
            min=0,
            max=10,
            sets={"Lo": [0, 0, 4, 6], "Mid": [2, 5, 8], "Hi": {"parameters": [4, 6, 10, 10]}},
        )
        assert config.sets["Lo"].type == "trapezoidal"
        assert config.sets["Mid"].type == "triangular"
        assert config.sets["Hi"].type == "trapezoidal"

        variable = config.to_variable("v")
        assert variable.set_names == ["Lo", "Mid", "Hi"]
        assert variable.get_set("Mid").parameters == (2.0, 5.0, 5.0, 8.0)

    def test_metadata_is_carried(self):
        variable = VariableConfig(
            label="Applicant Age",
            unit="yrs",
            min=18,
            max=100,
            step=1,
            default=30,
            sets={"Young": [18, 18, 25, 30]},
        ).to_variable("age")
        assert (variable.label, variable.unit, variable.step, variable.default) == (
            "Applicant Age",
            "yrs",
            1,
            30,
        )

    def test_invalid_domain(self):
        with pytest.raises(ConfigurationError) as exc_info:
            VariableConfig(min=10, max=0, sets={"Lo": [0, 0, 4, 6]})
        assert exc_info.value.error_code == "CONFIG-InvalidDomain"

    def test_default_outside_domain(self):
        with pytest.raises(ConfigurationError) as exc_info:
            VariableConfig(min=0, max=10, default=11, sets={"Lo": [0, 0, 4, 6]})
        assert exc_info.value.error_code == "CONFIG-DefaultOutOfRange"


class TestFuzzySystemConfig:
    def test_build(self, minimal_config):
        registry, rule_base = minimal_config.build()
        assert registry.input_names == ["v"]
        assert registry.output_name == "risk"
        assert len(rule_base) == 2
        assert rule_base[0].antecedents == (Clause("v", "Lo"),)
        assert rule_base[0].consequent == Clause("risk", "Low")
        assert rule_base[0].description == "low v"

    def test_rule_antecedent_order_is_preserved(self, minimal_config_dict):
        minimal_config_dict["variables"]["w"] = {
            "min": 0,
            "max": 1,
            "sets": {"On": [0, 1, 1, 1]},
        }
        minimal_config_dict["rules"].append(
            {"when": [["w", "On"], ["v", "Hi"]], "then": ["risk", "High"]}
        )
        _, rule_base = FuzzyConfigLoader.load_from_dict(minimal_config_dict).build()
        assert [c.variable for c in rule_base[2].antecedents] == ["w", "v"]

    def test_empty_rules_allowed(self, minimal_config_dict):
        minimal_config_dict["rules"] = []
        _, rule_base = FuzzyConfigLoader.load_from_dict(minimal_config_dict).build()
        assert len(rule_base) == 0


class TestFuzzyConfigLoaderDict:
    def test_load_from_dict(self, minimal_config_dict):
        config = FuzzyConfigLoader.load_from_dict(minimal_config_dict)
        assert isinstance(config, FuzzySystemConfig)
        assert set(config.variables) == {"v", "risk"}

    def test_not_a_mapping(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            FuzzyConfigLoader.load_from_dict(["v", "risk"])
        assert exc_info.value.error_code == "CONFIG-InvalidFuzzySystem"

    def test_schema_violation(self, minimal_config_dict):
        del minimal_config_dict["variables"]["v"]["min"]
        with pytest.raises(InvalidConfigurationError) as exc_info:
            FuzzyConfigLoader.load_from_dict(minimal_config_dict)
        assert exc_info.value.error_code == "CONFIG-SchemaValidationFailed"
        assert exc_info.value.details["validation_errors"]

    def test_wrong_parameter_count(self, minimal_config_dict):
        minimal_config_dict["variables"]["v"]["sets"]["Lo"] = {
            "type": "trapezoidal",
            "parameters": [0, 0, 4],
        }
        with pytest.raises(InvalidConfigurationError):
            FuzzyConfigLoader.load_from_dict(minimal_config_dict)

    def test_unknown_set_type(self, minimal_config_dict):
        minimal_config_dict["variables"]["v"]["sets"]["Lo"] = {
            "type": "gaussian",
            "parameters": [5, 1],
        }
        with pytest.raises(InvalidConfigurationError):
            FuzzyConfigLoader.load_from_dict(minimal_config_dict)

    def test_bad_breakpoint_order(self, minimal_config_dict):
        minimal_config_dict["variables"]["v"]["sets"]["Lo"]["parameters"] = [0, 4, 0, 6]
        with pytest.raises(ConfigurationError) as exc_info:
            FuzzyConfigLoader.load_from_dict(minimal_config_dict)
        assert exc_info.value.error_code == "CONFIG-InvalidParameterOrder"

    def test_missing_output_variable(self, minimal_config_dict):
        minimal_config_dict["output"] = "score"
        with pytest.raises(ConfigurationError) as exc_info:
            FuzzyConfigLoader.load_from_dict(minimal_config_dict)
        assert exc_info.value.error_code == "REGISTRY-MissingOutput"

    @pytest.mark.parametrize(
        "rule, error_code",
        [
            ({"when": [["w", "Lo"]], "then": ["risk", "Low"]}, "RULES-UnknownVariable"),
            ({"when": [["v", "Mid"]], "then": ["risk", "Low"]}, "RULES-UnknownSet"),
            ({"when": [["v", "Lo"]], "then": ["risk", "Medium"]}, "RULES-UnknownSet"),
            ({"when": [["v", "Lo"]], "then": ["v", "Hi"]}, "RULES-InvalidConsequent"),
            (
                {"when": [["v", "Lo"], ["v", "Hi"]], "then": ["risk", "Low"]},
                "RULES-RepeatedVariable",
            ),
            (
                {"when": [["risk", "Low"]], "then": ["risk", "High"]},
                "RULES-OutputInAntecedent",
            ),
        ],
    )
    def test_invalid_rules_identify_the_rule(self, minimal_config_dict, rule, error_code):
        minimal_config_dict["rules"].append(rule)
        with pytest.raises(ConfigurationError) as exc_info:
            FuzzyConfigLoader.load_from_dict(minimal_config_dict)
        assert exc_info.value.error_code == error_code
        assert exc_info.value.context["rule_index"] == 2

    def test_empty_antecedent_is_a_schema_error(self, minimal_config_dict):
        minimal_config_dict["rules"].append({"when": [], "then": ["risk", "Low"]})
        with pytest.raises(InvalidConfigurationError):
            FuzzyConfigLoader.load_from_dict(minimal_config_dict)


class TestFuzzyConfigLoaderYaml:
    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "system.yaml"
        path.write_text(
            """
output: risk
variables:
  v:
    min: 0
    max: 10
    sets:
      Lo: {type: trapezoidal, parameters: [0, 0, 4, 6]}
      Hi: [4, 6, 10, 10]
  risk:
    min: 0
    max: 100
    sets:
      Low: [0, 0, 40, 60]
      High: [40, 60, 100, 100]
rules:
  - when: [[v, Lo]]
    then: [risk, Low]
""",
            encoding="utf-8",
        )
        config = FuzzyConfigLoader(tmp_path).load_from_yaml("system.yaml")
        registry, rule_base = config.build()
        assert registry.get("v").set_names == ["Lo", "Hi"]
        assert len(rule_base) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationFileError) as exc_info:
            FuzzyConfigLoader(tmp_path).load_from_yaml("absent.yaml")
        assert exc_info.value.error_code == "CONFIG-FileNotFound"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("variables: [unclosed\n", encoding="utf-8")
        with pytest.raises(InvalidConfigurationError) as exc_info:
            FuzzyConfigLoader().load_from_yaml(path)
        assert exc_info.value.error_code == "CONFIG-InvalidYaml"
        assert exc_info.value.context["file"] == str(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(InvalidConfigurationError) as exc_info:
            FuzzyConfigLoader().load_from_yaml(path)
        assert exc_info.value.error_code == "CONFIG-SchemaValidationFailed"

    def test_errors_name_the_file(self, tmp_path):
        path = tmp_path / "bad_rule.yaml"
        path.write_text(
            """
variables:
  v: {min: 0, max: 10, sets: {Lo: [0, 0, 4, 6]}}
  risk: {min: 0, max: 100, sets: {Low: [0, 0, 40, 60]}}
rules:
  - when: [[v, Hi]]
    then: [risk, Low]
""",
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError) as exc_info:
            FuzzyConfigLoader().load_from_yaml(path)
        assert exc_info.value.error_code == "RULES-UnknownSet"
        assert exc_info.value.context["file"] == str(path)
        assert exc_info.value.context["rule_index"] == 0

    def test_load_default_honours_settings(self, tmp_path, monkeypatch, minimal_config_dict):
        import yaml

        path = tmp_path / "override.yaml"
        path.write_text(yaml.safe_dump(minimal_config_dict), encoding="utf-8")
        monkeypatch.setenv("LOANRISK_CONFIG_PATH", str(path))
        get_engine_settings.cache_clear()
        try:
            config = FuzzyConfigLoader().load_default()
        finally:
            get_engine_settings.cache_clear()
        assert set(config.variables) == {"v", "risk"}
