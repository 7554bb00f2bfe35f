import os

import pytest
from dulwich.repo import Repo

from LWT.Config import WorkonConfig, reset_config
from LWT.Errors import ToolFailed


class FakeRunner(object):
	"""Stands in for LWT.Tools.ToolRunner: answers portageq, equery, ebuild info, repo
	and loman from in-memory tables and records every call."""

	def __init__(self, overlays, arch='amd64'):
		self.overlays = overlays
		self.arch = arch
		self.which = {}         # token -> ebuild path
		self.ebuild_infos = {}  # ebuild path -> `ebuild info` output
		self.manifest = []      # (path, project) as `repo list` prints them
		self.calls = []
		self.privileged = []

	def run(self, cmd, cwd=None, env=None, shell=False, capture=True):
		self.calls.append((cmd, cwd, env))
		if shell:
			return ''
		tool = cmd[0].split('-')[0] if cmd[0].startswith(('equery', 'ebuild', 'portageq')) else cmd[0]
		if tool == 'portageq':
			return 'ARCH="%s"\nPORTDIR_OVERLAY="%s"\n' % (self.arch, ' '.join(self.overlays))
		if tool == 'equery':
			tokens = [c for c in cmd[2:] if not c.startswith('--')]
			try:
				return ''.join('%s\n' % self.which[t] for t in tokens)
			except KeyError:
				raise ToolFailed(cmd, 1, 'no match')
		if tool == 'ebuild':
			return self.ebuild_infos.get(cmd[1], '')
		if tool == 'repo':
			return ''.join('%s : %s\n' % (path, project) for path, project in self.manifest)
		return ''

	def run_privileged(self, cmd):
		self.privileged.append(cmd)
		if cmd[0] == 'mkdir':
			os.makedirs(cmd[-1], exist_ok=True)
		elif cmd[0] == 'ln':
			target, link = cmd[-2], cmd[-1]
			if os.path.lexists(link):
				os.unlink(link)
			os.symlink(target, link)
		return ''

	def commands(self, tool):
		return [c[0] for c in self.calls if not isinstance(c[0], str) and c[0][0].startswith(tool)]


class Workspace(object):
	def __init__(self, root):
		self.root = str(root)
		self.source_root = os.path.join(self.root, 'trunk')
		self.overlay = os.path.join(self.source_root, 'src', 'overlays', 'overlay-test')
		self.build_root = os.path.join(self.root, 'build')
		self.host_root = os.path.join(self.root, 'hostroot')
		for d in (self.source_root, self.overlay, os.path.join(self.build_root, 'eve'),
				  self.host_root):
			os.makedirs(d)
		self.config = WorkonConfig(source_root=self.source_root, build_root=self.build_root,
								   host_root=self.host_root, sudo='', environ={})
		self.runner = FakeRunner([self.overlay])

	def ebuild(self, key, inherit=True, keywords='~*', project=None, stable=False,
			   version='9999'):
		category, pn = key.split('/')
		d = os.path.join(self.overlay, category, pn)
		os.makedirs(d, exist_ok=True)
		lines = ['EAPI=7']
		if project:
			lines.append('CROS_WORKON_PROJECT="%s"' % project)
		if inherit:
			lines.append('inherit cros-workon')
		lines.append('KEYWORDS="%s"' % keywords)
		path = os.path.join(d, '%s-%s.ebuild' % (pn, version))
		with open(path, 'w') as f:
			f.write('\n'.join(lines) + '\n')
		if stable:
			with open(os.path.join(d, '%s-0.0.1-r1.ebuild' % pn), 'w') as f:
				f.write('EAPI=7\nKEYWORDS="*"\n')
		self.runner.which[key] = path
		self.runner.which[pn] = path
		return path

	def checkout(self, relpath, project=None):
		path = os.path.join(self.source_root, relpath)
		os.makedirs(path)
		Repo.init(path).close()
		if project:
			self.runner.manifest.append((relpath, project))
		return path

	def info_for(self, key, projects, srcdirs):
		self.runner.ebuild_infos[self.runner.which[key]] = (
			'>>> Running pkg_info\n'
			'CROS_WORKON_SRCDIR=(%s)\n'
			'CROS_WORKON_PROJECT=(%s)\n' % (
				' '.join('"%s"' % s for s in srcdirs),
				' '.join('"%s"' % p for p in projects)))

	def read(self, name):
		with open(os.path.join(self.config.workon_dir, name)) as f:
			return f.read()


@pytest.fixture
def ws(tmp_path):
	workspace = Workspace(tmp_path)
	yield workspace
	reset_config()
