import io
import os

import pytest

from LWT.Cli import build_parser, main


def run(ws, *argv):
	out = io.StringIO()
	status = main(list(argv), config=ws.config, runner=ws.runner, out=out)
	return status, out.getvalue()

def test_unknown_command(ws, capsys):
	assert run(ws, '--board', 'eve', 'frobnicate') == (2, '')
	assert 'usage:' in capsys.readouterr().err
	assert not os.path.exists(ws.config.workon_dir)
	assert ws.runner.calls == [] and ws.runner.privileged == []

def test_start_then_list(ws):
	ws.ebuild('cat/pkgA')
	ws.info_for('cat/pkgA', ['chromiumos/a'], [os.path.join(ws.source_root, 'src/a')])
	assert run(ws, '--board', 'eve', 'start', 'cat/pkgA') == (0, '')
	assert ws.read('eve') == '=cat/pkgA-9999\n'
	assert ws.read('eve.mask') == '<cat/pkgA-9999\n'
	assert run(ws, '--board', 'eve', 'list') == (0, 'cat/pkgA\n')
	assert run(ws, 'list-all') == (0, 'eve: cat/pkgA\n')
	assert run(ws, '--board', 'eve', 'stop', 'pkgA') == (0, '')
	assert run(ws, '--board', 'eve', 'list') == (0, '')

def test_info_without_project(ws):
	ws.ebuild('cat/pkgA')
	assert run(ws, '--board', 'eve', 'info', 'cat/pkgA') == (0, 'cat/pkgA - -\n')

def test_list_all_packages(ws):
	ws.ebuild('cat/pkgB', stable=True)
	ws.ebuild('cat/pkgA')
	assert run(ws, '--board', 'eve', 'list', '--all') == (0, 'cat/pkgA\ncat/pkgB\n')
	assert run(ws, '--board', 'eve', 'list', '--all', '--workon-only') == (0, 'cat/pkgA\n')

def test_start_all_and_stop_all(ws):
	for key in ('cat/pkgA', 'cat/pkgB'):
		ws.ebuild(key, project=key)
		ws.info_for(key, [key], [os.path.join(ws.source_root, key)])
	assert run(ws, '--host', 'start', '--all')[0] == 0
	assert ws.read('host') == '=cat/pkgA-9999\n=cat/pkgB-9999\n'
	assert run(ws, '--host', 'stop', '--all')[0] == 0
	assert ws.read('host') == ''

def test_start_dot(ws, monkeypatch):
	ws.ebuild('cat/pkgA', project='chromiumos/a')
	root = ws.checkout('src/platform/a', project='chromiumos/a')
	ws.info_for('cat/pkgA', ['chromiumos/a'], [root])
	monkeypatch.chdir(root)
	assert run(ws, '--board', 'eve', 'start', '.')[0] == 0
	assert ws.read('eve') == '=cat/pkgA-9999\n'

def test_symlinks_refreshed(ws):
	assert run(ws, '--board', 'eve', 'list')[0] == 0
	link = os.path.join(ws.build_root, 'eve', 'etc', 'portage', 'package.mask', 'cros-workon')
	assert os.readlink(link) == os.path.join(ws.config.workon_dir, 'eve.mask')

@pytest.mark.parametrize('argv', [
	('--board', 'eve', '--host', 'list'),
	('--board', 'eve', 'start', 'x', '--revision', 'r'),
	('--board', 'eve', 'stop', 'x', '--remote', 'r'),
	('--board', 'eve', 'list', '--command', 'ls'),
	('--board', 'eve', 'iterate', 'x'),
	('--board', 'eve', 'stop'),
	('--board', 'eve', 'info', '--all', 'x'),
	('--board', 'eve', 'list', 'x'),
	('--board', 'eve', 'start', 'x', '--workon-only'),
	('--board', 'eve', 'iterate', 'x', '--command', 'ls', '--workon-only'),
	('list',),
])
def test_usage_errors(ws, argv):
	assert run(ws, *argv) == (2, '')
	assert not os.path.exists(ws.config.workon_dir)

def test_board_not_set_up(ws):
	assert run(ws, '--board', 'nosuchboard', 'list') == (1, '')
	assert not os.path.exists(ws.config.workon_dir)

def test_not_eligible_changes_nothing(ws, caplog):
	ws.ebuild('cat/plain', inherit=False)
	assert run(ws, '--board', 'eve', 'start', 'cat/plain')[0] == 1
	assert ws.read('eve') == ''
	assert 'not a cros-workon package' in caplog.text

def test_unknown_package(ws):
	assert run(ws, '--board', 'eve', 'start', 'nosuch')[0] == 1
	assert ws.read('eve') == ''

def test_parser_defaults():
	args = build_parser().parse_args(['list'])
	assert not args.all_packages and not args.workon_only and args.packages == []

def test_start_all_resolves_ebuilds_in_one_query(ws):
	keys = ['cat/pkgA', 'cat/pkgB', 'cat/pkgC', 'cat/pkgD']
	for key in keys:
		ws.ebuild(key, project=key)
		ws.info_for(key, [key], [os.path.join(ws.source_root, key)])
	assert run(ws, '--host', 'start', '--all')[0] == 0
	equery = ws.runner.commands('equery')
	assert equery == [['equery', 'which', '--include-masked'] + keys]

def test_iterate_all_resolves_ebuilds_in_one_query(ws):
	keys = ['cat/pkgA', 'cat/pkgB', 'cat/pkgC']
	os.makedirs(ws.config.workon_dir)
	with open(os.path.join(ws.config.workon_dir, 'eve'), 'w') as f:
		f.write(''.join('=%s-9999\n' % key for key in keys))
	for key in keys:
		ws.ebuild(key)
		srcdir = os.path.join(ws.source_root, key)
		os.makedirs(srcdir)
		ws.info_for(key, [key], [srcdir])
	assert run(ws, '--board', 'eve', 'iterate', '--all', '--command', 'make')[0] == 0
	assert len(ws.runner.commands('equery-eve')) == 1
	assert [c[1] for c in ws.runner.calls if c[0] == 'make'] == [
		os.path.join(ws.source_root, key) for key in keys]
