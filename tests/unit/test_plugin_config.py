"""Unit tests for plugin configuration loading and RenderJobConfig mapping."""

import pytest

from docket_step.contexts.resolution.exceptions import ConfigurationError, ConfigurationErrorReason
from docket_step.contexts.resolution.job_data_structures import RenderJobConfig
from docket_step.contexts.step.plugin_config import (
    load_plugin_config,
    load_render_job_config,
    plugin_config_path,
)

TITLE = "intranda_step_save_docket_file"


@pytest.mark.unit
class TestRenderJobConfigFromDict:
    def test_all_options(self):
        config = RenderJobConfig.from_dict(
            {
                "template": {"file": "docket.xsl", "name": "docket-default", "id": 4},
                "output": {"format": "tiff", "filename": "EPN_{process_suffix}_0000.tif", "folder": "master"},
                "dotsPerInch": 150,
            }
        )
        assert config == RenderJobConfig(
            template_file="docket.xsl",
            template_name="docket-default",
            template_id=4,
            output_format="tiff",
            output_filename="EPN_{process_suffix}_0000.tif",
            output_folder="master",
            dots_per_inch=150,
        )

    def test_config_root_is_unwrapped(self):
        config = RenderJobConfig.from_dict({"config": {"template": {"name": "docket-default"}}})
        assert config.template_name == "docket-default"

    def test_legacy_output_file(self):
        config = RenderJobConfig.from_dict({"output": {"file": "/data/dockets/{process}.pdf"}})
        assert config.output_filename == "/data/dockets/{process}.pdf"
        assert config.output_folder is None

    def test_filename_preferred_over_legacy_file(self):
        config = RenderJobConfig.from_dict({"output": {"file": "a.pdf", "filename": "b.pdf"}})
        assert config.output_filename == "b.pdf"

    def test_blank_values_are_unset(self):
        config = RenderJobConfig.from_dict({"template": {"file": "  ", "name": ""}, "output": {"file": ""}})
        assert config.template_file is None
        assert config.template_name is None
        assert config.output_filename is None

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            RenderJobConfig.from_dict(["template", "output"])
        assert exc_info.value.reason == ConfigurationErrorReason.INVALID_CONFIG

    def test_empty_config(self):
        assert RenderJobConfig.from_dict({}) == RenderJobConfig()


@pytest.mark.unit
class TestLoadPluginConfig:
    def test_default_location(self, tmp_path):
        assert plugin_config_path(TITLE, tmp_path) == tmp_path / f"plugin_{TITLE}.yaml"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "plugin.yaml"
        path.write_text(
            "config:\n"
            "  template:\n"
            "    id: 2\n"
            "  output:\n"
            "    filename: '{process}.pdf'\n"
            "    folder: master\n"
            "  dotsPerInch: 600\n"
        )
        config = load_render_job_config(TITLE, path)

        assert config.template_id == 2
        assert config.output_filename == "{process}.pdf"
        assert config.output_folder == "master"
        assert config.dots_per_inch == 600

    def test_interpolation_is_resolved(self, tmp_path):
        path = tmp_path / "plugin.yaml"
        path.write_text(
            "root: /data/dockets\n"
            "config:\n"
            "  output:\n"
            "    file: ${root}/{process}.pdf\n"
        )
        config = load_render_job_config(TITLE, path)
        assert config.output_filename == "/data/dockets/{process}.pdf"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match=TITLE):
            load_plugin_config(TITLE, tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "plugin.yaml"
        path.write_text("")
        assert load_plugin_config(TITLE, path) == {}

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "plugin.yaml"
        path.write_text("config:\n  template: [unclosed\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_plugin_config(TITLE, path)

        error = exc_info.value
        assert error.reason == ConfigurationErrorReason.INVALID_CONFIG
        assert error.path == path
        assert error.cause is not None

    def test_list_root(self, tmp_path):
        path = tmp_path / "plugin.yaml"
        path.write_text("- template\n- output\n")

        with pytest.raises(ConfigurationError, match="must be a mapping") as exc_info:
            load_render_job_config(TITLE, path)
        assert exc_info.value.reason == ConfigurationErrorReason.INVALID_CONFIG

    def test_unresolvable_interpolation(self, tmp_path):
        path = tmp_path / "plugin.yaml"
        path.write_text("config:\n  output:\n    file: ${missing_root}/{process}.pdf\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_plugin_config(TITLE, path)
        assert exc_info.value.reason == ConfigurationErrorReason.INVALID_CONFIG
