#!/usr/bin/env python3
"""
Tests for the command registry.

This module covers dispatching, every verb's success and failure output,
and the history bookkeeping done on each submitted line.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest
from datetime import datetime
from unittest.mock import Mock

from memshell.commands import CommandRegistry
from memshell.errors import EvaluationError
from memshell.output import BufferedOutput, OutputKind, OutputLine
from memshell.providers import RecordingLinkOpener, StaticSystemInfoProvider, SystemInfo
from memshell.session import ShellSession
from memshell.vfs import VirtualFileSystem


INFO = SystemInfo(
    os_label='Test OS', kernel_label='Test Kernel', shell_label='Test CLI',
    agent_label='CPython 3.12', resolution='80x24', uptime='1m 5s',
)


class RegistryTestCase(unittest.TestCase):
    """Shared fixtures: a seeded filesystem with the session at /home/user."""

    def setUp(self):
        self.fs = VirtualFileSystem.seeded()
        self.session = ShellSession(self.fs, '/home/user')
        self.output = BufferedOutput()
        self.opener = RecordingLinkOpener()
        self.registry = CommandRegistry(
            self.session, self.output,
            system_info=StaticSystemInfoProvider(INFO),
            link_opener=self.opener,
            clock=lambda: datetime(2026, 10, 19, 15, 4, 5),
        )

    def run_lines(self, *lines):
        for line in lines:
            self.registry.dispatch(line)
        return self.output.drain()

    def texts(self, *lines):
        return [line.text for line in self.run_lines(*lines)]

    def errors(self, lines):
        return [line for line in lines if line.kind is OutputKind.ERROR]


class TestDispatch(RegistryTestCase):

    def test_blank_line_is_silent(self):
        self.assertEqual(self.run_lines('', '   ', '\t'), [])
        self.assertEqual(len(self.session.history), 0)

    def test_history_records_raw_line(self):
        self.run_lines('echo   hi  ')
        self.assertEqual(list(self.session.history), ['echo   hi  '])

    def test_history_is_most_recent_first_and_resets_cursor(self):
        self.run_lines('echo a', 'echo b')
        self.session.recall_older()
        self.run_lines('echo c')
        self.assertEqual(list(self.session.history), ['echo c', 'echo b', 'echo a'])
        self.assertEqual(self.session.history.cursor, -1)

    def test_failed_commands_are_still_recorded(self):
        self.run_lines('cat missing.txt', 'foobar')
        self.assertEqual(list(self.session.history), ['foobar', 'cat missing.txt'])

    def test_verbs_are_case_sensitive(self):
        lines = self.run_lines('LS')
        self.assertEqual(lines[0], OutputLine('Command not found: LS', OutputKind.ERROR))

    def test_unknown_verb_prints_error_then_help(self):
        lines = self.run_lines('foobar')
        self.assertEqual(lines[0], OutputLine('Command not found: foobar', OutputKind.ERROR))
        self.assertEqual([line.text for line in lines[1:]], self.registry.help_lines())

    def test_unknown_verb_output_is_stable(self):
        first = self.run_lines('foobar')
        second = self.run_lines('foobar')
        self.assertEqual(first, second)

    def test_unexpected_handler_failure_is_reported(self):
        self.registry.evaluator = Mock()
        self.registry.evaluator.evaluate.side_effect = RuntimeError('boom')
        with self.assertLogs('memshell.commands', level='ERROR'):
            lines = self.run_lines('calc 1')
        self.assertEqual(lines, [OutputLine('Error: boom', OutputKind.ERROR)])

    def test_missing_argument_checked_before_handler(self):
        lines = self.run_lines('mkdir')
        self.assertEqual(lines, [OutputLine('Error: Missing directory name.', OutputKind.ERROR)])
        self.assertEqual(self.fs.list(self.session.cwd), [])


class TestHelp(RegistryTestCase):

    def test_help_lists_every_verb(self):
        text = '\n'.join(self.texts('help'))
        self.assertTrue(text.startswith('Available commands:'))
        for verb in ['help', 'echo', 'clear', 'date', 'ls', 'cd', 'mkdir', 'rmdir',
                     'touch', 'rm', 'cat', 'calc', 'sysfetch', 'browser', 'ddg']:
            self.assertIn(f'  {verb}', text)
        self.assertNotIn('notepad', text)

    def test_help_for_one_verb(self):
        self.assertEqual(self.texts('help cd'), ['cd [path] - Change directory'])

    def test_help_for_unknown_verb_lists_everything(self):
        self.assertEqual(self.texts('help nope'), self.registry.help_lines())


class TestSimpleVerbs(RegistryTestCase):

    def test_echo_joins_with_single_spaces(self):
        self.assertEqual(self.texts('echo  hello    world'), ['hello world'])

    def test_echo_without_args(self):
        self.assertEqual(self.texts('echo'), [''])

    def test_clear_empties_sink(self):
        self.output.emit('old line')
        self.registry.dispatch('clear')
        self.assertEqual(self.output.lines, [])

    def test_date_format(self):
        self.assertEqual(self.texts('date'), ['10/19/2026, 3:04:05 PM'])

    def test_date_midnight_and_noon(self):
        self.registry.clock = lambda: datetime(2026, 1, 2, 0, 0, 9)
        self.assertEqual(self.texts('date'), ['1/2/2026, 12:00:09 AM'])
        self.registry.clock = lambda: datetime(2026, 1, 2, 12, 30, 0)
        self.assertEqual(self.texts('date'), ['1/2/2026, 12:30:00 PM'])


class TestFilesystemVerbs(RegistryTestCase):

    def test_ls_empty_directory(self):
        self.assertEqual(self.texts('ls'), ['(empty directory)'])

    def test_ls_marks_kinds(self):
        self.session.change_directory('/')
        self.assertEqual(self.run_lines('ls'), [
            OutputLine('home', OutputKind.DIRECTORY),
            OutputLine('bin', OutputKind.DIRECTORY),
            OutputLine('etc', OutputKind.DIRECTORY),
            OutputLine('documents.txt', OutputKind.FILE),
        ])

    def test_mkdir_and_rmdir(self):
        self.assertEqual(self.texts('mkdir projects'), ['Directory "projects" created.'])
        self.assertEqual(self.run_lines('ls'), [OutputLine('projects', OutputKind.DIRECTORY)])
        self.assertEqual(self.texts('rmdir projects'), ['Directory "projects" removed.'])
        self.assertEqual(self.texts('ls'), ['(empty directory)'])

    def test_mkdir_existing(self):
        self.run_lines('mkdir a')
        self.assertEqual(self.texts('mkdir a'), ['Error: Directory already exists: a'])

    def test_mkdir_ignores_extra_args(self):
        self.run_lines('mkdir a b')
        self.assertEqual(self.texts('ls'), ['a'])

    def test_rmdir_errors(self):
        self.run_lines('mkdir outer', 'cd outer', 'mkdir inner', 'cd ..', 'touch f')
        self.assertEqual(self.texts('rmdir'), ['Error: Missing directory name.'])
        self.assertEqual(self.texts('rmdir ghost'), ['Error: Directory not found: ghost'])
        self.assertEqual(self.texts('rmdir f'), ['Error: Directory not found: f'])
        self.assertEqual(self.texts('rmdir outer'), ['Error: Directory not empty: outer'])

    def test_touch_and_rm(self):
        self.assertEqual(self.texts('touch notes.txt'), ['File "notes.txt" created.'])
        self.assertEqual(self.texts('touch notes.txt'),
                         ['Error: File or directory already exists: notes.txt'])
        self.assertEqual(self.texts('rm notes.txt'), ['File "notes.txt" removed.'])
        self.assertEqual(self.texts('rm notes.txt'), ['Error: File not found: notes.txt'])

    def test_touch_and_rm_missing_argument(self):
        self.assertEqual(self.texts('touch'), ['Error: Missing file name.'])
        self.assertEqual(self.texts('rm'), ['Error: Missing file name.'])

    def test_rm_refuses_directory(self):
        self.run_lines('mkdir keep')
        self.assertEqual(self.texts('rm keep'), ['Error: File not found: keep'])
        self.assertEqual(self.texts('ls'), ['keep'])

    def test_cat(self):
        self.run_lines('cd /')
        self.assertEqual(self.texts('cat documents.txt'), ['This is a sample document.'])
        self.assertEqual(self.texts('cat bin'), ['Error: File not found: bin'])
        self.assertEqual(self.texts('cat'), ['Error: Missing file name.'])

    def test_verbs_are_scoped_to_current_directory(self):
        self.assertEqual(self.texts('cat documents.txt'), ['Error: File not found: documents.txt'])
        self.assertEqual(self.texts('cat /documents.txt'), ['Error: File not found: /documents.txt'])

    def test_end_to_end(self):
        lines = self.run_lines('mkdir projects', 'cd projects', 'touch notes.txt', 'cat notes.txt')
        self.assertEqual(self.errors(lines), [])
        self.assertEqual(lines[-1], OutputLine('', OutputKind.NORMAL))
        self.run_lines('cd ..')
        self.assertEqual(self.session.current_path, '/home/user')
        self.assertEqual(self.run_lines('ls'), [OutputLine('projects', OutputKind.DIRECTORY)])


class TestCd(RegistryTestCase):

    def test_cd_missing_argument(self):
        self.assertEqual(self.texts('cd'), ['Error: Missing directory path.'])
        self.assertEqual(self.session.current_path, '/home/user')

    def test_cd_not_found(self):
        node = self.session.cwd
        self.assertEqual(self.texts('cd nonexistent'), ['Error: Directory not found: nonexistent'])
        self.assertEqual(self.session.current_path, '/home/user')
        self.assertIs(self.session.cwd, node)

    def test_cd_into_file(self):
        self.assertEqual(self.texts('cd /documents.txt'), ['Error: Not a directory: /documents.txt'])
        self.assertEqual(self.session.current_path, '/home/user')

    def test_cd_is_silent_on_success(self):
        self.assertEqual(self.texts('cd /etc'), [])
        self.assertEqual(self.session.current_path, '/etc')

    def test_cd_dotdot_clamps_at_root(self):
        self.run_lines('cd ..', 'cd ..', 'cd ..')
        self.assertEqual(self.session.current_path, '/')


class TestCalc(RegistryTestCase):

    def test_calc(self):
        self.assertEqual(self.texts('calc 2 + 3 * 4'), ['= 14'])
        self.assertEqual(self.texts('calc (1+1)/4'), ['= 0.5'])
        self.assertEqual(self.texts('calc 6 / 3'), ['= 2'])

    def test_calc_missing_expression_shows_usage(self):
        self.assertEqual(self.run_lines('calc'), [
            OutputLine('Error: Missing expression for calculator.', OutputKind.ERROR),
            OutputLine('Usage: calc [expression] (e.g., calc 2 + 3 * 4)', OutputKind.NORMAL),
        ])

    def test_calc_invalid(self):
        self.assertEqual(self.texts('calc 1 / 0'), ['Error: Invalid expression: division by zero'])

    def test_calc_never_runs_code(self):
        lines = self.run_lines('calc __import__("os").getcwd()')
        self.assertEqual(len(self.errors(lines)), 1)

    def test_calc_uses_injected_evaluator(self):
        evaluator = Mock()
        evaluator.evaluate.return_value = 99
        self.registry.evaluator = evaluator
        self.assertEqual(self.texts('calc   anything goes'), ['= 99'])
        evaluator.evaluate.assert_called_once_with('anything goes')

    def test_evaluator_errors_are_reported(self):
        evaluator = Mock()
        evaluator.evaluate.side_effect = EvaluationError('nope')
        self.registry.evaluator = evaluator
        self.assertEqual(self.texts('calc 1'), ['Error: Invalid expression: nope'])


class TestExternalCapabilities(RegistryTestCase):

    def test_sysfetch_uses_provider(self):
        text = self.texts('sysfetch')
        self.assertIn('        OS Name:    Test OS', text)
        self.assertIn('        Kernel:     Test Kernel', text)
        self.assertIn('        Shell:      Test CLI', text)
        self.assertIn('        Agent:      CPython 3.12', text)
        self.assertIn('        Resolution: 80x24', text)
        self.assertIn('        Uptime:     1m 5s', text)

    def test_browser_opens_encoded_query(self):
        self.assertEqual(self.texts('browser html os & more'),
                         ['Opening DuckDuckGo in a new tab for query: "html os & more"'])
        self.assertEqual(self.opener.opened, ['https://duckduckgo.com/?q=html%20os%20%26%20more'])

    def test_ddg_is_an_alias(self):
        self.run_lines('ddg python')
        self.assertEqual(self.opener.opened, ['https://duckduckgo.com/?q=python'])

    def test_browser_missing_query(self):
        self.assertEqual(self.texts('browser'), [
            'Error: Missing search query for browser.',
            'Usage: browser [search query] (e.g., browser html os)',
        ])
        self.assertEqual(self.opener.opened, [])

    def test_custom_search_url(self):
        self.registry.search_url = 'https://example.org/search?q={query}'
        self.run_lines('ddg a b')
        self.assertEqual(self.opener.opened, ['https://example.org/search?q=a%20b'])


if __name__ == '__main__':
    unittest.main()
