"""Tests for configuration models and config file loading."""

import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

import pytest

from graph_redact import REDACTED, ConfigError, RedactionConfig, TagRule, as_copy, create_redactor, tagged
from graph_redact.config_loader import find_config_file, load_config, load_config_data
from graph_redact.registry import default_registry


class TestTagRule:
    """Tests for rule transforms."""

    def test_constant_replacement(self):
        """Without a pattern the whole string is replaced."""
        rule = TagRule(name="hide", replacement="<hidden>")

        assert rule.to_transform()("anything") == "<hidden>"

    def test_pattern_replacement(self):
        """With a pattern only matches are replaced."""
        rule = TagRule(
            name="mask_email",
            pattern=re.compile(r"[\w.]+@[\w.]+"),
            replacement="<email>",
        )

        assert rule.to_transform()("contact a.b@example.com now") == "contact <email> now"


class TestRedactionConfigFromDict:
    """Tests for building config from parsed data."""

    def test_defaults(self):
        """An empty dict gives the defaults."""
        config = RedactionConfig.from_dict({})

        assert config.placeholder == REDACTED
        assert config.tag_key == "redact"
        assert config.private_prefix == "_"
        assert config.custom_tags == []

    def test_scalar_options(self):
        """Placeholder, tag key and private prefix are read."""
        config = RedactionConfig.from_dict(
            {"placeholder": "***", "tag_key": "mask", "private_prefix": "__"}
        )

        assert config.placeholder == "***"
        assert config.tag_key == "mask"
        assert config.private_prefix == "__"

    def test_tags_as_list(self):
        """Custom tags can be a list of tables."""
        config = RedactionConfig.from_dict({
            "custom_tags": [
                {"name": "digits", "pattern": r"\d", "replacement": "#"},
                {"name": "gone", "replacement": ""},
            ]
        })

        assert [rule.name for rule in config.custom_tags] == ["digits", "gone"]
        assert config.custom_tags[0].pattern.pattern == r"\d"
        assert config.custom_tags[1].pattern is None

    def test_tags_as_table(self):
        """Custom tags can be a table keyed by name."""
        config = RedactionConfig.from_dict({"tags": {"digits": {"pattern": r"\d"}}})

        rule = config.custom_tags[0]
        assert rule.name == "digits"
        assert rule.replacement == REDACTED

    def test_replacement_defaults_to_placeholder(self):
        """Rules without a replacement use the configured placeholder."""
        config = RedactionConfig.from_dict({
            "placeholder": "***",
            "custom_tags": [{"name": "hide"}],
        })

        assert config.custom_tags[0].replacement == "***"

    def test_invalid_pattern(self):
        """Broken regexes are reported, not skipped."""
        with pytest.raises(ConfigError):
            RedactionConfig.from_dict({"custom_tags": [{"name": "bad", "pattern": "("}]})

    def test_missing_name(self):
        """Every custom tag needs a name."""
        with pytest.raises(ConfigError):
            RedactionConfig.from_dict({"custom_tags": [{"pattern": "x"}]})

    @pytest.mark.parametrize(
        "tags",
        [
            {"lower": "x"},
            ["lower"],
            [{"name": "ok"}, 3],
            "lower",
        ],
    )
    def test_malformed_tags(self, tags):
        """Tag entries that aren't tables are reported as config errors."""
        with pytest.raises(ConfigError):
            RedactionConfig.from_dict({"tags": tags})

    def test_malformed_tag_table_in_file(self, tmp_path: Path):
        """A TOML tag table holding a plain value fails cleanly."""
        config_file = tmp_path / "graph-redact.toml"
        config_file.write_text('[graph-redact.tags]\nlower = "x"\n')

        with pytest.raises(ConfigError):
            load_config(config_path=config_file)

    def test_to_dict(self):
        """to_dict is stable and round-trips the rule fields."""
        config = RedactionConfig.from_dict({"custom_tags": [{"name": "d", "pattern": r"\d"}]})

        data = config.to_dict()

        assert list(data) == ["custom_tags", "placeholder", "private_prefix", "tag_key"]
        assert data["custom_tags"] == [{"name": "d", "pattern": r"\d", "replacement": REDACTED}]


class TestConfigFileFinding:
    """Tests for finding config files."""

    def test_find_toml_config(self):
        """Test finding graph-redact.toml."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            config_file = root / "graph-redact.toml"
            config_file.write_text('placeholder = "***"\n')

            assert find_config_file(root) == config_file

    def test_find_hidden_yaml_config(self):
        """Test finding .graph-redact.yml."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            config_file = root / ".graph-redact.yml"
            config_file.write_text("placeholder: '***'\n")

            assert find_config_file(root) == config_file

    def test_no_config_file(self):
        """Test when no config file exists."""
        with tempfile.TemporaryDirectory() as tmpdir:
            assert find_config_file(Path(tmpdir)) is None

    def test_config_file_priority(self):
        """TOML is found before YAML."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "graph-redact.toml").write_text('placeholder = "1"\n')
            (root / ".graph-redact.yml").write_text("placeholder: '2'\n")

            assert find_config_file(root).name == "graph-redact.toml"


class TestConfigLoading:
    """Tests for loading config from files."""

    def test_load_toml_section(self, tmp_path: Path):
        """Values may sit under a [graph-redact] section."""
        (tmp_path / "graph-redact.toml").write_text(
            '[other]\nfoo = "bar"\n\n'
            '[graph-redact]\nplaceholder = "<x>"\n\n'
            '[graph-redact.tags.digits]\npattern = "\\\\d"\nreplacement = "#"\n'
        )

        config = load_config(tmp_path)

        assert config.placeholder == "<x>"
        assert config.custom_tags[0].name == "digits"
        assert config.custom_tags[0].to_transform()("a1b2") == "a#b#"

    def test_load_yaml(self, tmp_path: Path):
        """YAML files are read with flat keys."""
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(
            "placeholder: '***'\n"
            "custom_tags:\n"
            "  - name: hide\n"
            "    replacement: '<hidden>'\n"
        )

        config = load_config(config_path=config_file)

        assert config.placeholder == "***"
        assert config.custom_tags[0].replacement == "<hidden>"

    def test_defaults_without_file(self, tmp_path: Path):
        """No file means default config."""
        assert load_config(tmp_path) == RedactionConfig()

    def test_missing_explicit_file(self, tmp_path: Path):
        """An explicit path that doesn't exist is an error."""
        with pytest.raises(ConfigError):
            load_config(config_path=tmp_path / "missing.toml")

    def test_unsupported_suffix(self, tmp_path: Path):
        """Only TOML and YAML are understood."""
        config_file = tmp_path / "config.ini"
        config_file.write_text("[graph-redact]\n")

        with pytest.raises(ConfigError):
            load_config_data(config_file)

    def test_invalid_toml(self, tmp_path: Path):
        """Parse errors become ConfigError."""
        config_file = tmp_path / "graph-redact.toml"
        config_file.write_text("placeholder = \n")

        with pytest.raises(ConfigError):
            load_config_data(config_file)


class TestCreateRedactorWithConfig:
    """Config flows into a private registry."""

    def test_placeholder_and_custom_tags(self):
        """Configured placeholder and tags are used for redaction."""
        config = RedactionConfig.from_dict({
            "placeholder": "***",
            "custom_tags": [{"name": "digits", "pattern": r"\d", "replacement": "#"}],
        })

        @dataclass
        class Card:
            holder: str = ""
            number: str = tagged("digits", default="")

        result = as_copy(Card("Ann", "4111-1111"), config=config)

        assert result == Card("***", "####-####")

    def test_default_registry_untouched(self):
        """Config tags don't leak into the shared registry."""
        config = RedactionConfig.from_dict({"custom_tags": [{"name": "config-only-tag"}]})

        redactor = create_redactor(config)

        assert "config-only-tag" in redactor.registry
        assert "config-only-tag" not in default_registry
        assert default_registry.placeholder == REDACTED
