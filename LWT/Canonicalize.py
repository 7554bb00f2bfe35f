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
from LWT.Errors import NotLiveEligible, LookupFailed
from LWT.ProjectIndex import ebuild_to_package, has_live_marker

__all__ = [ 'Canonicalizer' ]

logger = logging.getLogger(__name__)

class Canonicalizer(object):
	"""Turns whatever the user typed (dbus, sys-apps/dbus, =sys-apps/dbus-9999, ...)
	into the category/package key the workon files use."""

	def __init__(self, config, store, portage_tools):
		self.config = config
		self.store = store
		self.portage = portage_tools
		# key -> ebuild path, for every key resolved through equery
		self.ebuild_paths = {}

	def canonicalize(self, token):
		''':return: the package key for a single token'''
		return self.canonicalize_all([ token ])[0]

	def canonicalize_all(self, tokens):
		"""Canonicalize a batch; all or nothing.

		:param tokens: a list of tokens or a single space-separated string
		:raise LookupFailed: if any token can't be resolved
		:raise NotLiveEligible: if any token resolves to an ebuild without the live marker
		:return: package keys, in token order, duplicates dropped"""
		if isinstance(tokens, str):
			tokens = tokens.split()
		tokens = [ t for t in tokens if t ]
		if not tokens:
			raise LookupFailed('no packages specified')

		# tokens already in the enabled list are canonical by construction
		live = set(self.store.list_live())
		unresolved = [ t for t in tokens if t not in live ]
		resolved = {}
		if unresolved:
			for token, ebuild_path in self.portage.which(unresolved).items():
				resolved[token] = self._check_ebuild(token, ebuild_path)

		keys = []
		for token in tokens:
			key = resolved.get(token, token)
			if key not in keys:
				keys.append(key)
		return keys

	def _check_ebuild(self, token, ebuild_path):
		key = ebuild_to_package(ebuild_path)
		if key not in self.config.always_eligible:
			try:
				with open(ebuild_path) as f:
					contents = f.read()
			except (IOError, OSError) as e:
				raise LookupFailed('cannot read %s for %s: %s' % (ebuild_path, token, e))
			if not has_live_marker(contents, self.config.live_marker):
				raise NotLiveEligible('%s is not a %s package (%s)' % (
					key, self.config.live_marker, ebuild_path))
		logger.debug('%s -> %s (%s)', token, key, ebuild_path)
		self.ebuild_paths[key] = ebuild_path
		return key

	def ebuild_for(self, key):
		''':return: the ebuild path of key, asking equery if it wasn't resolved here already'''
		return self.ebuilds_for([ key ])[key]

	def ebuilds_for(self, keys):
		""":return: dict key -> ebuild path; keys not resolved yet go to equery in one batch"""
		missing = [ key for key in keys if key not in self.ebuild_paths ]
		if missing:
			self.ebuild_paths.update(self.portage.which(missing))
		return dict((key, self.ebuild_paths[key]) for key in keys)
