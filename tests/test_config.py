"""
Tests for config loading, validation and logging setup.
"""
import json
import logging
from logging.handlers import RotatingFileHandler

from image_term.config import DEFAULT_CONFIG, Config, _default_config_path
from image_term.logging_conf import setup_logging


class TestConfig:
    """Tests for Config."""

    def test_env_override_path(self, isolated_config):
        """IMAGE_TERM_CONFIG selects the config file."""
        assert _default_config_path() == str(isolated_config)

    def test_missing_file_created(self, isolated_config):
        """load() writes defaults when asked to create the file."""
        cfg = Config.load()
        assert isolated_config.exists()
        assert cfg.render_mode == "color"
        assert json.loads(isolated_config.read_text())["render"]["workers"] == 1

    def test_missing_file_not_created(self, isolated_config):
        """create_if_missing=False leaves the filesystem alone."""
        cfg = Config.load(create_if_missing=False)
        assert not isolated_config.exists()
        assert cfg.workers == 1

    def test_user_values_merged(self, isolated_config):
        """User values override defaults; untouched keys keep defaults."""
        isolated_config.write_text(json.dumps({"render": {"mode": "ascii"}}))
        cfg = Config.load()
        assert cfg.render_mode == "ascii"
        assert cfg["logging"]["level"] == "WARNING"

    def test_invalid_values_fall_back(self, isolated_config):
        """Bad values are coerced or replaced by defaults."""
        isolated_config.write_text(json.dumps({
            "render": {"mode": "sixel", "workers": 500, "default_cols": "x"},
            "logging": {"level": "debug", "pil_debug": "yes", "rotate_keep": -3},
        }))
        cfg = Config.load()
        assert cfg.render_mode == "color"
        assert cfg.workers == 64
        assert cfg["render"]["default_cols"] == 80
        assert cfg["logging"]["level"] == "DEBUG"
        assert cfg["logging"]["pil_debug"] is True
        assert cfg["logging"]["rotate_keep"] == 0

    def test_corrupt_file_backed_up(self, isolated_config):
        """Unparseable JSON is copied aside and defaults are used."""
        isolated_config.write_text("{not json")
        cfg = Config.load()
        assert cfg.render_mode == "color"
        backup = isolated_config.with_name(isolated_config.name + ".corrupt.bak")
        assert backup.read_text() == "{not json"

    def test_defaults_not_mutated(self, isolated_config):
        """Validating user data never edits DEFAULT_CONFIG."""
        isolated_config.write_text(json.dumps({"render": {"workers": 8}}))
        Config.load()
        assert DEFAULT_CONFIG["render"]["workers"] == 1

    def test_update_and_save(self, isolated_config):
        """update() validates; save() persists atomically."""
        cfg = Config.load()
        cfg.update({"render": {"workers": "4"}})
        assert cfg.workers == 4
        cfg.save()
        assert Config.load().workers == 4


class TestLogging:
    """Tests for setup_logging()."""

    def test_rotating_file(self, tmp_path, isolated_config):
        """A configured log file gets a rotating handler."""
        log_file = tmp_path / "image_term.log"
        isolated_config.write_text(json.dumps({"logging": {"file": str(log_file), "level": "INFO"}}))
        root = logging.getLogger()
        before = list(root.handlers)
        try:
            setup_logging(Config.load())
            added = [h for h in root.handlers if h not in before and isinstance(h, RotatingFileHandler)]
            assert len(added) == 1
            logging.getLogger("image_term.test").warning("hello")
            added[0].flush()
            assert "hello" in log_file.read_text()
        finally:
            for h in list(root.handlers):
                if h not in before:
                    root.removeHandler(h)
                    h.close()

    def test_pil_logger_quiet_by_default(self, isolated_config):
        """Pillow's logger is held at WARNING unless pil_debug is set."""
        setup_logging(Config.load(create_if_missing=False))
        assert logging.getLogger("PIL").level == logging.WARNING
