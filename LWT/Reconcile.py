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

import logging
import os
from LWT.Checkout import GitCheckout, NotACheckout
from LWT.EbuildInfoParser import EbuildInfoSyntaxError

__all__ = [ 'Reconciler' ]

logger = logging.getLogger(__name__)

class Reconciler(object):
	"""Moves packages between stable and live for one target, and asks the manifest
	tool for checkouts of whatever just went live.  It never syncs the checkout itself."""

	def __init__(self, config, target, store, canonicalizer, portage_tools, manifest_tools,
			runner):
		self.config = config
		self.target = target
		self.store = store
		self.canonicalizer = canonicalizer
		self.portage = portage_tools
		self.manifest = manifest_tools
		self.runner = runner

	def start(self, keys, remote=None, revision=None):
		"""Make keys live.  Keys that already are get a warning and are otherwise left alone.

		:param remote: if set, manifest entries are added against this remote instead of
		tracking the project's default remote
		:param revision: with remote, the revision to pin the new manifest entries to
		:return: the keys that actually changed state"""
		started = [ key for key in keys if self.store.add(key) ]
		if not started:
			return started

		self._update_manifest(started, remote, revision)
		logger.info("Started working on '%s' for '%s'", ' '.join(started), self.target.name)
		logger.info('Please run "repo sync" now.')
		return started

	def stop(self, keys):
		"""Make keys stable again.  The manifest is left alone: whatever was done in
		the live checkouts is simply no longer built.

		:return: the keys that actually changed state"""
		stopped = [ key for key in keys if self.store.remove(key) ]
		if stopped:
			logger.info("Stopped working on '%s' for '%s'", ' '.join(stopped), self.target.name)
		return stopped

	def _update_manifest(self, keys, remote, revision):
		tracked = set(project for project, path in self.manifest.project_paths())
		ebuilds = self.canonicalizer.ebuilds_for(keys)
		for key in keys:
			try:
				info = self.portage.ebuild_info(ebuilds[key])
			except EbuildInfoSyntaxError:
				if key not in self.config.always_eligible:
					raise
				logger.debug('%s declares no projects; not touching the manifest for it', key)
				info = None
			if info:
				for project, srcdir in zip(info.projects, info.srcdirs):
					if remote:
						self.manifest.add_remote(project, self._checkout_path(srcdir),
									 remote, revision)
					elif project in tracked:
						logger.debug('%s is already in the manifest', project)
					else:
						self.manifest.add_workon(project)
						tracked.add(project)
			if key == self.config.chrome_key:
				self._switch_chrome()

	def _checkout_path(self, srcdir):
		''':return: manifest-style path (relative to the source root) of the checkout holding srcdir'''
		path = os.path.realpath(srcdir)
		if os.path.isdir(path):
			try:
				path = GitCheckout(path).root
			except NotACheckout:
				logger.debug('%s is not in a git checkout; using it as is', path)
		return os.path.relpath(path, os.path.realpath(self.config.source_root))

	def _switch_chrome(self):
		'''Put the chromium checkout, if there is one, on the manifest-tracked revision'''
		checkout_dir = self.config.chromium_checkout
		if not os.path.isdir(checkout_dir):
			logger.debug('no chromium checkout at %s', checkout_dir)
			return
		try:
			checkout = GitCheckout(checkout_dir)
		except NotACheckout:
			logger.debug('%s is not a chromium checkout', checkout_dir)
			return
		logger.info('Switching chromium checkout %s to the manifest revision', checkout.root)
		self.runner.run([ self.config.chrome_switch_tool ], cwd=checkout.root, capture=False)
