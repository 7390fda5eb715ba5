"""Tests for the mdsite command-line interface."""

import pytest
import os
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mdsite_pkg import cli


class TestCli:
    """Test cases for cli.main."""

    def test_build_from_flags(self, temp_dir, mock_content_dir, mock_template_file, mock_css_file, mock_output_dir, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)

        exit_code = cli.main([
            '--source', mock_content_dir,
            '--output', mock_output_dir,
            '--template', mock_template_file,
            '--css', mock_css_file,
        ])

        assert exit_code == 0
        assert Path(mock_output_dir, 'index.html').exists()
        assert Path(mock_output_dir, 'notes', 'a.html').exists()
        assert Path(mock_output_dir, 'style.css').exists()
        assert 'Site generated in' in capsys.readouterr().out

    def test_build_from_config_file(self, temp_dir, mock_content_dir, mock_template_file, monkeypatch):
        monkeypatch.chdir(temp_dir)
        Path(temp_dir, 'config.toml').write_text(
            'source_dir = "content"\noutput_dir = "site"\ntemplate_file = "template.html"\n',
            encoding='utf-8'
        )

        assert cli.main([]) == 0
        assert Path(temp_dir, 'site', 'index.html').exists()

    def test_skipped_documents_still_exit_zero(self, temp_dir, mock_content_dir, mock_template_file, mock_output_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        Path(mock_content_dir, 'bad.md').write_text('---\ndescription: only\n---\n\nbody', encoding='utf-8')

        exit_code = cli.main(['--source', mock_content_dir, '--output', mock_output_dir, '--template', mock_template_file])

        assert exit_code == 0
        assert not Path(mock_output_dir, 'bad.html').exists()
        assert Path(mock_output_dir, 'index.html').exists()

    def test_missing_required_settings(self, temp_dir, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)
        assert cli.main(['--source', 'content']) == 1
        assert 'Missing required setting(s)' in capsys.readouterr().err

    def test_fatal_template_error(self, temp_dir, mock_content_dir, mock_output_dir, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)
        exit_code = cli.main([
            '--source', mock_content_dir,
            '--output', mock_output_dir,
            '--template', os.path.join(temp_dir, 'missing.html'),
        ])
        assert exit_code == 1
        assert 'Failed to read template file' in capsys.readouterr().err

    def test_log_dir(self, temp_dir, mock_content_dir, mock_template_file, mock_output_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        log_dir = os.path.join(temp_dir, 'logs')

        cli.main([
            '--source', mock_content_dir, '--output', mock_output_dir,
            '--template', mock_template_file, '--log-dir', log_dir, '--verbose',
        ])

        log_files = os.listdir(log_dir)
        assert len(log_files) == 1
        log_text = Path(log_dir, log_files[0]).read_text(encoding='utf-8')
        assert 'Processing Markdown file' in log_text
        assert 'Pages written: 2' in log_text

    def test_init_creates_starter_project(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)

        assert cli.main(['--init']) == 0
        for name in ['mdsite.toml', 'templates/page.html', 'style.css', 'content/index.md']:
            assert Path(temp_dir, name).exists()

        assert cli.main([]) == 0
        html = Path(temp_dir, 'output', 'index.html').read_text(encoding='utf-8')
        assert '<title>Home</title>' in html
        assert '<h1>Welcome</h1>' in html
        assert '<style>' in html
        assert Path(temp_dir, 'output', 'style.css').exists()

    def test_init_reports_unwritable_location(self, temp_dir, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)
        Path(temp_dir, 'templates').write_text('a file where a directory belongs', encoding='utf-8')

        assert cli.main(['--init']) == 1
        assert 'Error:' in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(['--version'])
        assert excinfo.value.code == 0
        assert '1.0.0' in capsys.readouterr().out
