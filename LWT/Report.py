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

"""Read-only views over the workon state, and iterate, which runs a command in the
source directories of a set of packages."""

import logging
import os

__all__ = [ 'Reporter', 'format_info', 'format_all_live', 'Iterator' ]

logger = logging.getLogger(__name__)

class Reporter(object):
	"""Answers list and info for one target.  Never modifies anything."""

	def __init__(self, config, store, index):
		self.config = config
		self.store = store
		self.index = index

	def list_live(self, live_only=False):
		''':return: sorted live keys of our target'''
		keys = sorted(self.store.list_live())
		if live_only:
			eligible = set(self.index.eligible_packages(live_only=True))
			keys = [ k for k in keys if k in eligible ]
		return keys

	def list_eligible(self, keyword=None, live_only=False):
		return self.index.eligible_packages(keyword, live_only=live_only)

	def info(self, keys, keyword=None):
		return self.index.workon_info(keys, keyword)

def format_info(rows):
	''':return: one "key project path" line per WorkonInfo row'''
	return [ '%s %s %s' % row for row in rows ]

def format_all_live(mapping):
	''':return: one "target: key key ..." line per target'''
	return [ '%s: %s' % (target, ' '.join(keys)) for target, keys in mapping.items() ]

class Iterator(object):
	"""Runs a shell command in every source directory of each package, in order.
	A failing command stops the whole run."""

	def __init__(self, canonicalizer, portage_tools, runner):
		self.canonicalizer = canonicalizer
		self.portage = portage_tools
		self.runner = runner

	def run(self, keys, command):
		ebuilds = self.canonicalizer.ebuilds_for(keys)
		for key in keys:
			info = self.portage.ebuild_info(ebuilds[key])
			for srcdir in info.srcdirs:
				if not os.path.isdir(srcdir):
					logger.warning('Skipping %s: %s is not checked out', key, srcdir)
					continue
				logger.info('Running "%s" on %s', command, key)
				self.runner.run(command, cwd=srcdir, shell=True, capture=False)
