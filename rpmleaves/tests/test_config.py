"""Tests for configuration file handling"""

import argparse

from rpmleaves.core import config
from rpmleaves.core.config import default_config, read_config


class TestReadConfig:
    """Tests for read_config()."""

    def test_missing_file(self, tmp_path):
        assert read_config(tmp_path / 'absent.conf') == default_config()

    def test_default_path(self, tmp_path, monkeypatch):
        path = tmp_path / 'rpmleaves.conf'
        path.write_text("optdepends = yes\n")
        monkeypatch.setattr(config, 'CONFIG_FILE', path)
        assert read_config()['optdepends'] is True

    def test_all_settings(self, tmp_path):
        path = tmp_path / 'rpmleaves.conf'
        path.write_text(
            "# rpmleaves settings\n"
            "\n"
            "root = /mnt/chroot\n"
            "dbpath=/mnt/chroot/var/lib/rpm\n"
            "OptDepends = true\n"
        )
        assert read_config(path) == {
            'root': '/mnt/chroot',
            'dbpath': '/mnt/chroot/var/lib/rpm',
            'optdepends': True,
        }

    def test_boolean_values(self, tmp_path):
        path = tmp_path / 'rpmleaves.conf'
        for value, expected in (('1', True), ('on', True), ('no', False), ('False', False)):
            path.write_text(f"optdepends = {value}\n")
            assert read_config(path)['optdepends'] is expected

    def test_invalid_boolean(self, tmp_path, caplog):
        path = tmp_path / 'rpmleaves.conf'
        path.write_text("optdepends = maybe\n")
        assert read_config(path)['optdepends'] is False
        assert 'invalid boolean' in caplog.text

    def test_unknown_key(self, tmp_path, caplog):
        path = tmp_path / 'rpmleaves.conf'
        path.write_text("colour = always\nroot = /srv\n")
        result = read_config(path)
        assert result['root'] == '/srv'
        assert 'unknown setting' in caplog.text

    def test_malformed_line(self, tmp_path, caplog):
        path = tmp_path / 'rpmleaves.conf'
        path.write_text("just some words\n")
        assert read_config(path) == default_config()
        assert "expected 'key = value'" in caplog.text

    def test_empty_value_keeps_default(self, tmp_path):
        path = tmp_path / 'rpmleaves.conf'
        path.write_text("root =\n")
        assert read_config(path)['root'] == '/'


class TestLoadSettings:
    """Tests for merging command-line options with the file."""

    def _args(self, **kwargs):
        values = {'root': None, 'dbpath': None, 'optdepends': False}
        values.update(kwargs)
        return argparse.Namespace(**values)

    def test_file_values_used(self, tmp_path, monkeypatch):
        from rpmleaves.cli.main import load_settings

        path = tmp_path / 'rpmleaves.conf'
        path.write_text("root = /srv\noptdepends = yes\n")
        monkeypatch.setattr(config, 'CONFIG_FILE', path)
        settings = load_settings(self._args())
        assert settings == {'root': '/srv', 'dbpath': None, 'optdepends': True}

    def test_options_override_file(self, tmp_path, monkeypatch):
        from rpmleaves.cli.main import load_settings

        path = tmp_path / 'rpmleaves.conf'
        path.write_text("root = /srv\ndbpath = /srv/rpm\n")
        monkeypatch.setattr(config, 'CONFIG_FILE', path)
        settings = load_settings(self._args(root='/mnt', optdepends=True))
        assert settings == {'root': '/mnt', 'dbpath': '/srv/rpm', 'optdepends': True}
