#    live-workon-tracking: live/stable ebuild toggling for Portage trees
#    Copyright (C) 2026  The live-workon-tracking authors
#
#    This program is free software; you can redistribute it and/or modify
#    it under the terms of the GNU General Public License as published by
#    the Free Software Foundation; either version 2 of the License, or
#    (at your option) any later version.
#
#    This program is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#    GNU General Public License for more details.
#
#    You should have received a copy of the GNU General Public License
#    along with this program; if not, write to the Free Software
#    Foundation, Inc., 51 Franklin St, Fifth Floor, Boston, MA  02110-1301  USA

"""Everything that shells out lives here.  Each query tool is asked at most once per
question per invocation: answers are memoized on the PortageTools / ManifestTools
instances, which live exactly as long as one command-line invocation."""

import logging
import os
import subprocess
from LWT.Errors import LookupFailed, ToolFailed
from LWT.EbuildInfoParser import parse_record, ebuild_info_from_record

__all__ = [ 'ToolRunner', 'PortageTools', 'ManifestTools' ]

logger = logging.getLogger(__name__)

class ToolRunner(object):
	"""Runs external commands.  Tests substitute an object with the same two methods."""

	def __init__(self, config):
		self.config = config

	def run(self, cmd, cwd=None, env=None, shell=False, capture=True):
		"""Run cmd and return its standard output (or '' when capture is False).
		Output that is not valid UTF-8 is decoded with replacement characters.

		:param env: extra environment variables layered over os.environ
		:raise ToolFailed: on a non-zero exit status or if the program can't be started"""
		full_env = None
		if env:
			full_env = os.environ.copy()
			full_env.update(env)
		printable = [cmd] if shell else cmd
		logger.debug('running %s%s', ' '.join(printable), cwd and ' in %s' % cwd or '')
		try:
			proc = subprocess.run(cmd, cwd=cwd, env=full_env, shell=shell,
					      stdout=subprocess.PIPE if capture else None,
					      stderr=subprocess.PIPE if capture else None,
					      encoding='utf-8', errors='replace')
		except OSError as e:
			raise ToolFailed(printable, 127, str(e))
		if proc.returncode != 0:
			raise ToolFailed(printable, proc.returncode, proc.stderr if capture else '')
		return proc.stdout if capture else ''

	def run_privileged(self, cmd):
		'''Run cmd through the configured privilege wrapper (sudo unless disabled)'''
		return self.run(list(self.config.sudo) + list(cmd))

class PortageTools(object):
	"""Package-query side of the external world, for one build target."""

	def __init__(self, target, runner):
		self.target = target
		self.runner = runner
		self._environment = None
		self._which = {}
		self._ebuild_info = {}

	def environment(self):
		""":return: dict with ARCH and PORTDIR_OVERLAY, from a single portageq call"""
		if self._environment is None:
			out = self.runner.run([self.target.tool('portageq'), 'envvar', '-v',
					       'ARCH', 'PORTDIR_OVERLAY'])
			record = parse_record(out, names=('ARCH', 'PORTDIR_OVERLAY'))
			if not record.get('ARCH'):
				raise LookupFailed('portageq did not report an ARCH for %s' % self.target.name)
			self._environment = record
		return self._environment

	@property
	def arch(self):
		return self._environment_value('ARCH')

	@property
	def overlays(self):
		return self._environment_value('PORTDIR_OVERLAY').split()

	def _environment_value(self, name):
		value = self.environment().get(name, '')
		if isinstance(value, tuple):
			value = ' '.join(value)
		return value

	def which(self, tokens):
		"""Resolve package tokens to ebuild paths with a single equery call, accepting
		~ARCH and masked ebuilds.

		:raise LookupFailed: if equery fails or does not answer for every token
		:return: dict token -> ebuild path"""
		missing = [ t for t in tokens if t not in self._which ]
		if missing:
			cmd = [self.target.tool('equery'), 'which', '--include-masked'] + missing
			try:
				out = self.runner.run(cmd, env={'ACCEPT_KEYWORDS': '~%s' % self.arch})
			except ToolFailed as e:
				raise LookupFailed('error looking up package(s) %s: %s' % (' '.join(missing), e))
			paths = [ line.strip() for line in out.splitlines() if line.strip() ]
			if len(paths) != len(missing):
				raise LookupFailed('equery returned %d ebuild(s) for %d package(s): %s' % (
					len(paths), len(missing), ' '.join(missing)))
			self._which.update(zip(missing, paths))
		return dict((t, self._which[t]) for t in tokens)

	def ebuild_info(self, ebuild_path):
		""":return: EbuildInfo (projects and source directories) from ``ebuild <path> info``"""
		if ebuild_path not in self._ebuild_info:
			out = self.runner.run([self.target.tool('ebuild'), ebuild_path, 'info'])
			record = parse_record(out, names=('CROS_WORKON_PROJECT', 'CROS_WORKON_SRCDIR'))
			self._ebuild_info[ebuild_path] = ebuild_info_from_record(record, origin=ebuild_path)
		return self._ebuild_info[ebuild_path]

class ManifestTools(object):
	"""The checkout-manifest side: repo for listing, loman for editing the local manifest."""

	def __init__(self, config, runner):
		self.config = config
		self.runner = runner
		self._project_paths = None

	def project_paths(self):
		""":return: list of (project name, checkout path relative to the source root)"""
		if self._project_paths is None:
			out = self.runner.run([self.config.manifest_tool, 'list'], cwd=self.config.source_root)
			pairs = []
			for line in out.splitlines():
				path, sep, project = line.partition(' : ')
				if not sep:
					logger.debug('ignoring manifest listing line: %s', line)
					continue
				pairs.append(( project.strip(), path.strip() ))
			self._project_paths = pairs
		return self._project_paths

	def add_workon(self, project):
		'''Ask for project to be tracked in the local manifest'''
		logger.info('Adding %s to the local manifest', project)
		self._edit(['add', '--workon', project])

	def add_remote(self, project, path, remote, revision=None):
		'''Add an explicit remote/revision manifest entry for project checked out at path'''
		logger.info('Adding %s (remote %s) at %s to the local manifest', project, remote, path)
		cmd = ['add', '--remote', remote]
		if revision:
			cmd += ['--revision', revision]
		self._edit(cmd + [project, path])

	def _edit(self, args):
		self.runner.run([self.config.manifest_edit_tool] + args, cwd=self.config.source_root)
		# the listing is stale now
		self._project_paths = None
