import logging
from pathlib import Path

from a11y_overlay.config import ConfigManager
from a11y_overlay.core.editor import Editor
from a11y_overlay.core.decorator import EditableDecorator
from a11y_overlay.core.identity import IdentityRegistry
from a11y_overlay import logging_config

from tests.conftest import FakeController


class TestConfigManager:

    def test_is_singleton(self):
        assert ConfigManager() is ConfigManager()

    def test_packaged_defaults(self):
        config = ConfigManager()
        assert config.get_id_attribute() == "data-quail-id"
        assert config.get_root_id() == 1
        assert config.get_ignore_attribute() == "data-a11y-ignore"
        assert config.strip_ignore_data() is False
        assert config.get_quickfix_packages() == ["a11y_overlay.quickfix"]
        assert config.get_quickfix_dirs() == []
        assert config.get_logging_config()["version"] == 1

    def test_user_overrides(self, isolated_config):
        (isolated_config / "checker.yml").write_text(
            "id_attribute: data-check-id\nroot_id: 5\nno_ignore_data: true\n",
            encoding="utf-8",
        )
        config = ConfigManager()
        assert config.get_id_attribute() == "data-check-id"
        assert config.get_root_id() == 5
        assert config.strip_ignore_data() is True
        # Keys not overridden keep their packaged value
        assert config.get_ignore_attribute() == "data-a11y-ignore"

        registry = IdentityRegistry()
        assert registry.id_attribute == "data-check-id"
        assert registry.root_id == 5

    def test_invalid_user_file_is_ignored(self, isolated_config, caplog):
        (isolated_config / "checker.yml").write_text("root_id: [unclosed\n", encoding="utf-8")
        with caplog.at_level(logging.ERROR, logger="a11y_overlay.config.manager"):
            config = ConfigManager()
        assert config.get_root_id() == 1
        assert "Could not parse user config" in caplog.text

    def test_invalid_root_id_falls_back(self, isolated_config):
        (isolated_config / "checker.yml").write_text("root_id: nope\n", encoding="utf-8")
        assert ConfigManager().get_root_id() == 1

    def test_plugin_dirs_expand_user(self, isolated_config):
        (isolated_config / "checker.yml").write_text(
            "quickfix:\n  plugin_dirs: ['~/fixes']\n", encoding="utf-8",
        )
        assert ConfigManager().get_quickfix_dirs() == [Path.home() / "fixes"]


class TestIgnoreDataSetting:

    def test_config_strips_ignore_attribute(self, isolated_config):
        (isolated_config / "checker.yml").write_text("no_ignore_data: true\n", encoding="utf-8")
        editor = Editor('<p data-a11y-ignore="x">a</p>')
        EditableDecorator(editor, FakeController())
        assert editor.get_data() == "<p>a</p>"

    def test_editor_setting_wins(self, isolated_config):
        (isolated_config / "checker.yml").write_text("no_ignore_data: true\n", encoding="utf-8")
        editor = Editor('<p data-a11y-ignore="x">a</p>', config={"no_ignore_data": False})
        EditableDecorator(editor, FakeController())
        assert editor.get_data() == '<p data-a11y-ignore="x">a</p>'

    def test_filter_bypass_follows_controller(self):
        editor = Editor("<p>a</p>")
        controller = FakeController()
        decorator = EditableDecorator(editor, controller)
        decorator.apply_markup()

        assert editor.get_data() == "<p>a</p>"
        controller.disable_filter_strip = True
        assert editor.get_data() == '<p data-quail-id="2">a</p>'


class TestLoggingSetup:

    def test_setup_logging_writes_to_log_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("A11Y_OVERLAY_LOG_DIR", str(tmp_path / "logs"))
        monkeypatch.setenv("A11Y_OVERLAY_DEBUG_MODULES", "a11y_overlay.core.identity")
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            logging_config.setup_logging()
            assert (tmp_path / "logs").is_dir()
            file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
            assert file_handlers
            assert file_handlers[0].baseFilename == str(tmp_path / "logs" / "a11y_overlay.log")
            assert logging.getLogger("a11y_overlay.core.identity").level == logging.DEBUG
        finally:
            for handler in root.handlers:
                if handler not in saved_handlers:
                    handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
            logging.getLogger("a11y_overlay.core.identity").setLevel(logging.NOTSET)
            logging.getLogger("a11y_overlay.core.identity").handlers.clear()
