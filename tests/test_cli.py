import io
import json
import logging
import sys
import time
from unittest import mock

import pytest

from knowling import helpers
from knowling.cli.knowcli import KnowlingCli, build_parser
from knowling.notes.model.note import Note, RelatedNote
from knowling.notes.service import RemoteOperationFailed


class TestKnowlingCli:

    @pytest.fixture(autouse=True)
    def isolate(self, tmp_path, monkeypatch):
        monkeypatch.setattr(helpers, 'DATA_LOCATION', tmp_path / 'data')
        monkeypatch.setattr(KnowlingCli, 'SETTINGS', {
            'service_url': 'http://notes.test',
            'related_threshold': 0.5,
            'month_names': 'english',
            'log_level': 'info'
        })
        monkeypatch.setattr(sys, 'excepthook', sys.excepthook)
        root_level = logging.getLogger().level
        root_handlers = list(logging.getLogger().handlers)
        panic_handlers = list(logging.getLogger('knowling.panic').handlers)
        yield
        logging.getLogger().setLevel(root_level)
        for name, kept in [('', root_handlers), ('knowling.panic', panic_handlers)]:
            logger = logging.getLogger(name or None)
            for handler in list(logger.handlers):
                if handler not in kept:
                    handler.close()
                    logger.removeHandler(handler)

    @staticmethod
    def _mock_service(monkeypatch) -> mock.Mock:
        service = mock.Mock()
        service.get_notes = mock.AsyncMock(return_value=[])
        service.get_note = mock.AsyncMock()
        service.save_note = mock.AsyncMock()
        service.delete_note = mock.AsyncMock(return_value=None)
        service.get_related_notes = mock.AsyncMock(return_value=[])
        service.close = mock.AsyncMock()
        urls = []

        def factory(url):
            urls.append(url)
            return service

        service.urls = urls
        monkeypatch.setattr('knowling.cli.knowcli.NoteService', factory)
        return service

    @staticmethod
    def _run(tmp_path, *args) -> KnowlingCli:
        return KnowlingCli(build_parser().parse_args(['--log-dir', str(tmp_path)] + list(args)))

    def test_list(self, tmp_path, monkeypatch, capsys):
        service = TestKnowlingCli._mock_service(monkeypatch)
        service.get_notes.return_value = [
            Note(text='# Groceries\nmilk', modified=int(time.time()), note_id='n1'),
            Note(text='Old idea', modified=int(time.mktime((2001, 2, 10, 12, 0, 0, 0, 0, -1))), note_id='n2')
        ]
        TestKnowlingCli._run(tmp_path, 'list')
        out = capsys.readouterr().out.splitlines()
        assert out[-2:] == ['February 2001', '  n2  Old idea']
        assert '  n1  # Groceries' in out
        service.close.assert_awaited_once()

    def test_show(self, tmp_path, monkeypatch, capsys):
        service = TestKnowlingCli._mock_service(monkeypatch)
        service.get_note.return_value = Note(text='# Title\n\nbody', modified=1, note_id='n1')
        TestKnowlingCli._run(tmp_path, 'show', 'n1')
        assert capsys.readouterr().out == '# Title\n\nbody\n'

        TestKnowlingCli._run(tmp_path, 'show', 'n1', '--html')
        assert '<h1>Title</h1>' in capsys.readouterr().out

    def test_save(self, tmp_path, monkeypatch, capsys):
        service = TestKnowlingCli._mock_service(monkeypatch)
        service.save_note.return_value = Note(text='hello', modified=1, note_id='new123')
        TestKnowlingCli._run(tmp_path, 'save', 'hello')
        assert capsys.readouterr().out == 'new123\n'
        service.save_note.assert_awaited_with(None, 'hello')

        TestKnowlingCli._run(tmp_path, 'save', '--id', 'new123', 'hello again')
        assert capsys.readouterr().out == ''
        service.save_note.assert_awaited_with('new123', 'hello again')

        monkeypatch.setattr(sys, 'stdin', io.StringIO('from stdin'))
        TestKnowlingCli._run(tmp_path, 'save', '-')
        service.save_note.assert_awaited_with(None, 'from stdin')

    def test_delete(self, tmp_path, monkeypatch):
        service = TestKnowlingCli._mock_service(monkeypatch)
        cli = TestKnowlingCli._run(tmp_path, 'delete', 'n1')
        service.delete_note.assert_awaited_once_with('n1')
        assert cli.router.history == ['/', '/edit/n1', '/']

    def test_related(self, tmp_path, monkeypatch, capsys):
        service = TestKnowlingCli._mock_service(monkeypatch)
        service.get_related_notes.return_value = [RelatedNote(Note(text='# Other', modified=1, note_id='n2'), 0.8)]
        TestKnowlingCli._run(tmp_path, 'related', 'n1')
        assert capsys.readouterr().out == '0.800  n2  Other\n'
        service.get_related_notes.assert_awaited_with('n1', 0.5)

        TestKnowlingCli._run(tmp_path, 'related', 'n1', '--threshold', '0.75')
        service.get_related_notes.assert_awaited_with('n1', 0.75)

    def test_failure_exits(self, tmp_path, monkeypatch):
        service = TestKnowlingCli._mock_service(monkeypatch)
        service.get_notes.side_effect = RemoteOperationFailed('get_notes', 'boom')
        with pytest.raises(SystemExit) as e:
            TestKnowlingCli._run(tmp_path, 'list')
        assert e.value.code == 21
        service.close.assert_awaited_once()

    def test_settings(self, tmp_path, monkeypatch):
        service = TestKnowlingCli._mock_service(monkeypatch)
        conf_file = tmp_path / 'conf.json'
        conf_file.write_text(json.dumps({'service_url': 'http://from-file', 'related_threshold': 0.9}))

        TestKnowlingCli._run(tmp_path, '--config', str(conf_file), 'list')
        assert service.urls[-1] == 'http://from-file'
        assert KnowlingCli.SETTINGS['related_threshold'] == 0.9

        TestKnowlingCli._run(tmp_path, '--config', str(conf_file), '--service-url', 'http://from-args', 'list')
        assert service.urls[-1] == 'http://from-args'

    def test_invalid_settings(self, tmp_path, monkeypatch):
        TestKnowlingCli._mock_service(monkeypatch)
        conf_file = tmp_path / 'conf.json'
        conf_file.write_text('{not json')
        with pytest.raises(SystemExit) as e:
            TestKnowlingCli._run(tmp_path, '--config', str(conf_file), 'list')
        assert e.value.code == 20

        for content in ['[]', '"x"', '{"month_names": "klingon"}', '{"log_level": "verbose"}']:
            conf_file.write_text(content)
            with pytest.raises(SystemExit) as e:
                TestKnowlingCli._run(tmp_path, '--config', str(conf_file), 'list')
            assert e.value.code == 20

        with pytest.raises(SystemExit) as e:
            TestKnowlingCli._run(tmp_path, '--config', str(tmp_path / 'missing.json'), 'list')
        assert e.value.code == 2

    def test_log_level_from_settings(self, tmp_path, monkeypatch):
        TestKnowlingCli._mock_service(monkeypatch)
        conf_file = tmp_path / 'conf.json'
        conf_file.write_text(json.dumps({'log_level': 'debug'}))

        TestKnowlingCli._run(tmp_path, '--config', str(conf_file), 'list')
        assert KnowlingCli.SETTINGS['log_level'] == 'debug'
        assert logging.getLogger().level == logging.DEBUG

        TestKnowlingCli._run(tmp_path, '--config', str(conf_file), '--log-level', 'warning', 'list')
        assert KnowlingCli.SETTINGS['log_level'] == 'warning'
        assert logging.getLogger().level == logging.WARNING

    def test_month_names(self):
        KnowlingCli.SETTINGS['month_names'] = 'system'
        assert len(KnowlingCli.month_names().names) == 12
        KnowlingCli.SETTINGS['month_names'] = 'english'
        assert KnowlingCli.month_names().label(2024, 5) == 'May 2024'
