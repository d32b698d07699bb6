"""
Tests for configuration loading.
"""

import textwrap

import pytest

from unitcalc import CalcConfig, Context, load_config
from unitcalc.config import CONFIG_ENV_VAR, default_config_path
from unitcalc.errors import ConfigError


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


class TestDefaults:
    """Test default configuration."""

    def test_defaults(self):
        """Defaults need no file."""
        config = CalcConfig()
        assert config.working_precision == 40
        assert config.auto_decimal_places == 10
        assert config.show_other_info is True
        assert config.variables == {}

    def test_missing_file(self, tmp_path):
        """A missing file yields the defaults."""
        assert load_config(tmp_path / "absent.yaml") == CalcConfig()

    def test_empty_file(self, tmp_path):
        """An empty document yields the defaults."""
        assert load_config(write_config(tmp_path, "")) == CalcConfig()

    def test_env_var_location(self, tmp_path, monkeypatch):
        """The environment variable overrides the default location."""
        path = write_config(tmp_path, "auto_decimal_places: 3\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert default_config_path() == path
        assert load_config().auto_decimal_places == 3


class TestLoading:
    """Test parsing and validation of configuration files."""

    def test_values(self, tmp_path):
        """All keys are read."""
        path = write_config(tmp_path, """\
            working_precision: 60
            auto_decimal_places: 4
            show_other_info: false
            variables:
              g0: 9.80665 m/s^2
        """)
        config = load_config(path)
        assert config.working_precision == 60
        assert config.auto_decimal_places == 4
        assert config.show_other_info is False
        assert config.variables == {"g0": "9.80665 m/s^2"}

    def test_numeric_variable_becomes_expression(self, tmp_path):
        """Plain YAML numbers are accepted as expressions."""
        config = load_config(write_config(tmp_path, "variables:\n  n: 42\n"))
        assert config.variables == {"n": "42"}

    def test_unknown_key(self, tmp_path):
        """Unknown keys fail with E601."""
        with pytest.raises(ConfigError) as exc:
            load_config(write_config(tmp_path, "precision: 10\n"))
        assert exc.value.code == "E601"

    def test_bad_type(self, tmp_path):
        """Values of the wrong type fail with E602."""
        with pytest.raises(ConfigError) as exc:
            load_config(write_config(tmp_path, "working_precision: lots\n"))
        assert exc.value.code == "E602"

    def test_out_of_range(self):
        """Values outside their range fail with E602."""
        with pytest.raises(ConfigError) as exc:
            CalcConfig(working_precision=5)
        assert exc.value.code == "E602"

    def test_invalid_yaml(self, tmp_path):
        """Unparseable YAML fails with E603."""
        with pytest.raises(ConfigError) as exc:
            load_config(write_config(tmp_path, "a: [1, 2\n"))
        assert exc.value.code == "E603"

    def test_not_a_mapping(self, tmp_path):
        """The top level must be a mapping."""
        with pytest.raises(ConfigError) as exc:
            load_config(write_config(tmp_path, "- 1\n- 2\n"))
        assert exc.value.code == "E603"


class TestConfiguredContext:
    """Test that configuration reaches evaluation."""

    def test_predefined_variables(self):
        """Configured variables are available to expressions."""
        context = Context(CalcConfig(variables={"g0": "9.80665 m/s^2"}))
        assert context.evaluate("g0 * 2 kg").main_result == "19.6133 N"

    def test_bad_variable(self):
        """A variable that does not evaluate is a configuration error."""
        with pytest.raises(ConfigError) as exc:
            Context(CalcConfig(variables={"bad": "1 +"}))
        assert exc.value.code == "E602"
        assert "variables.bad" in exc.value.message

    def test_auto_decimal_places(self):
        """Approximations use the configured number of places."""
        context = Context(CalcConfig(auto_decimal_places=4))
        assert context.evaluate("1/3").other_info == ["approx. 0.3333"]
