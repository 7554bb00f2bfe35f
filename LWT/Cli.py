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

import argparse
import logging
import os
import sys
from LWT.Canonicalize import Canonicalizer
from LWT.Config import get_config, LIVE_VERSION
from LWT.Errors import WorkonError, UsageError
from LWT.ProjectIndex import ProjectIndex
from LWT.Reconcile import Reconciler
from LWT.Report import Reporter, Iterator, format_info, format_all_live
from LWT.Targets import BuildTarget
from LWT.Tools import ToolRunner, PortageTools, ManifestTools
from LWT.WorkonStore import WorkonStore, list_all_live

__all__ = [ 'COMMANDS', 'build_parser', 'main' ]

logger = logging.getLogger(__name__)

COMMANDS = ( 'start', 'stop', 'info', 'list', 'list-all', 'iterate' )

# the "." package token: whatever is built from the checkout we're standing in
HERE = '.'

def build_parser():
	parser = argparse.ArgumentParser(prog='live-workon',
		description='Switch Portage packages between their stable ebuilds and live '
			    '(%s) ebuilds built from the source checkout.' % LIVE_VERSION)
	target = parser.add_argument_group('build target')
	target.add_argument('--board', metavar='NAME', help='work on the sysroot of board NAME')
	target.add_argument('--host', action='store_true', help='work on the host (SDK) packages')
	parser.add_argument('--all', dest='all_packages', action='store_true',
			    help='start/info: every live-eligible package; stop/iterate: every live '
				 'package; list: every live-eligible package')
	parser.add_argument('--workon-only', action='store_true',
			    help='restrict --all and list to packages that have no stable ebuild')
	parser.add_argument('--remote', metavar='NAME',
			    help='start: add manifest entries against remote NAME')
	parser.add_argument('--revision', metavar='REF',
			    help='start: with --remote, pin new manifest entries to REF')
	parser.add_argument('--command', metavar='CMD', help='iterate: shell command to run')
	parser.add_argument('-v', '--verbose', action='store_true', help='show debugging output')
	parser.add_argument('-q', '--quiet', action='store_true', help='only show warnings and errors')
	parser.add_argument('cmd', metavar='command', choices=COMMANDS,
			    help='one of: %s' % ', '.join(COMMANDS))
	parser.add_argument('packages', nargs='*', metavar='package',
			    help='package names or atoms; "." for the current checkout')
	return parser

def setup_logging(verbose=False, quiet=False):
	level = logging.INFO
	if verbose:
		level = logging.DEBUG
	elif quiet:
		level = logging.WARNING
	logging.basicConfig(level=level, format='%(levelname)s: %(message)s', stream=sys.stderr)
	logging.getLogger('LWT').setLevel(level)

def check_flags(args):
	''':raise UsageError: for flag combinations that make no sense, before anything is touched'''
	if args.board and args.host:
		raise UsageError('--board and --host are mutually exclusive')
	if args.revision and not args.remote:
		raise UsageError('--revision requires --remote')
	if (args.remote or args.revision) and args.cmd != 'start':
		raise UsageError('--remote and --revision only apply to start')
	if args.workon_only and not args.all_packages and args.cmd != 'list':
		raise UsageError('--workon-only only applies with --all or list')
	if args.command and args.cmd != 'iterate':
		raise UsageError('--command only applies to iterate')
	if args.cmd == 'iterate' and not args.command:
		raise UsageError('iterate requires --command')
	if args.cmd in ('start', 'stop', 'info', 'iterate'):
		if args.all_packages and args.packages:
			raise UsageError('give either --all or package names, not both')
		if not args.all_packages and not args.packages:
			raise UsageError('%s needs package names or --all' % args.cmd)
	elif args.packages:
		raise UsageError('%s takes no package names' % args.cmd)

class Session(object):
	"""Everything one invocation needs, wired together for one build target."""

	def __init__(self, config, target, runner):
		self.config = config
		self.target = target
		self.runner = runner
		self.store = WorkonStore(config, target)
		self.portage = PortageTools(target, runner)
		self.manifest = ManifestTools(config, runner)
		self.index = ProjectIndex(config, self.portage, self.manifest)
		self.canonicalizer = Canonicalizer(config, self.store, self.portage)
		self.reconciler = Reconciler(config, target, self.store, self.canonicalizer,
					     self.portage, self.manifest, runner)
		self.reporter = Reporter(config, self.store, self.index)
		self.iterator = Iterator(self.canonicalizer, self.portage, runner)

	def prepare(self):
		"""Fail on a missing sysroot before touching anything, then make sure the state
		files exist and portage's symlinks point at them."""
		self.target.check_setup()
		self.store.ensure_files()
		self.target.refresh_symlinks(self.runner)

	def resolve(self, tokens, cwd=None):
		"""Canonicalize tokens, expanding "." to the packages of the checkout at cwd"""
		expanded = []
		for token in tokens:
			if token == HERE:
				expanded.extend(self.index.packages_for_path(cwd or os.getcwd()))
			else:
				expanded.append(token)
		return self.canonicalizer.canonicalize_all(expanded)

def run(args, config, runner, out=None):
	''':return: exit status of the command described by args'''
	if out is None:
		out = sys.stdout
	check_flags(args)

	if args.cmd == 'list-all':
		for line in format_all_live(list_all_live(config)):
			print(line, file=out)
		return 0

	session = Session(config, BuildTarget.from_flags(config, args.board, args.host), runner)
	session.prepare()

	if args.cmd == 'list':
		if args.all_packages:
			keys = session.reporter.list_eligible(live_only=args.workon_only)
		else:
			keys = session.reporter.list_live(live_only=args.workon_only)
		for key in keys:
			print(key, file=out)
	elif args.cmd == 'start':
		if args.all_packages:
			keys = session.index.eligible_packages(live_only=args.workon_only)
		else:
			keys = session.resolve(args.packages)
		session.reconciler.start(keys, remote=args.remote, revision=args.revision)
	elif args.cmd == 'stop':
		if args.all_packages:
			keys = session.reporter.list_live(live_only=args.workon_only)
		else:
			keys = session.canonicalizer.canonicalize_all(args.packages)
		session.reconciler.stop(keys)
	elif args.cmd == 'info':
		if args.all_packages:
			keys = session.index.eligible_packages(live_only=args.workon_only)
		else:
			keys = session.canonicalizer.canonicalize_all(args.packages)
		for line in format_info(session.reporter.info(keys)):
			print(line, file=out)
	elif args.cmd == 'iterate':
		if args.all_packages:
			keys = session.reporter.list_live(live_only=args.workon_only)
		else:
			keys = session.resolve(args.packages)
		session.iterator.run(keys, args.command)
	return 0

def main(argv=None, config=None, runner=None, out=None):
	"""Command-line entry point.

	:return: 0 on success, 2 for usage errors, 1 for any other failure"""
	parser = build_parser()
	try:
		args = parser.parse_args(argv)
	except SystemExit as e:
		# argparse has already printed usage and the complaint
		return e.code

	setup_logging(args.verbose, args.quiet)
	if config is None:
		config = get_config()
	if runner is None:
		runner = ToolRunner(config)

	try:
		return run(args, config, runner, out)
	except UsageError as e:
		parser.print_usage(sys.stderr)
		logger.error('%s', e)
		return 2
	except WorkonError as e:
		logger.error('%s', e)
		return 1

if __name__ == '__main__':
	sys.exit(main())
