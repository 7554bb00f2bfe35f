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

import glob
import logging
import os
import re
from LWT.Checkout import GitCheckout
from LWT.EbuildInfoParser import EbuildInfoSyntaxError, parse_record, as_list
from LWT.Errors import LookupFailed

__all__ = [ 'PLACEHOLDER', 'ebuild_to_package', 'expand_ebuild_vars', 'has_live_marker',
	    'keyword_matches', 'is_live_only', 'ProjectIndex' ]

logger = logging.getLogger(__name__)

# stands in for a missing project or source directory in WorkonInfo rows
PLACEHOLDER = '-'

def ebuild_to_package(ebuild_path):
	""":return: 'category/package' from .../category/package/package-version.ebuild"""
	parts = os.path.normpath(ebuild_path).split(os.sep)
	if len(parts) < 3 or not parts[-3] or not parts[-2]:
		raise LookupFailed('cannot derive a package from %s' % ebuild_path)
	return '%s/%s' % (parts[-3], parts[-2])

_EBUILD_VAR_RE = re.compile(r'\$\{(\w+)\}|\$(\w+)')
_REVISION_RE = re.compile(r'-r\d+$')

def expand_ebuild_vars(value, ebuild_path):
	"""Substitute the variables portage derives from an ebuild's path (CATEGORY, PN,
	PV, P, PF).  Anything else is left as written."""
	category, pn = ebuild_to_package(ebuild_path).split('/')
	pf = os.path.basename(ebuild_path)[:-len('.ebuild')]
	pv = _REVISION_RE.sub('', pf[len(pn) + 1:])
	known = { 'CATEGORY': category, 'PN': pn, 'PV': pv, 'P': '%s-%s' % (pn, pv), 'PF': pf }

	def substitute(m):
		name = m.group(1) or m.group(2)
		return known.get(name, m.group(0))
	expanded = _EBUILD_VAR_RE.sub(substitute, value)
	if '$' in expanded:
		logger.debug('%s: cannot expand %s', ebuild_path, expanded)
	return expanded

_marker_res = {}
def has_live_marker(contents, marker):
	''':return: True iff the ebuild text inherits the marker eclass'''
	if marker not in _marker_res:
		_marker_res[marker] = re.compile(r'^inherit\s(?:.*\s)?%s(?:\s|$)' % re.escape(marker), re.M)
	return bool(_marker_res[marker].search(contents))

def keyword_matches(keywords, keyword):
	"""Does a KEYWORDS value accept keyword?  "~*" accepts any ~arch, "*" any arch.

	:param keywords: KEYWORDS as parsed (string or tuple)"""
	if isinstance(keywords, tuple):
		keywords = ' '.join(keywords)
	wildcard = keyword.startswith('~') and '~*' or '*'
	tokens = keywords.split()
	return keyword in tokens or wildcard in tokens

def is_live_only(ebuild_path):
	''':return: True iff no stable ebuild sits next to this live one'''
	siblings = glob.glob(os.path.join(os.path.dirname(ebuild_path), '*.ebuild'))
	return all(os.path.samefile(s, ebuild_path) for s in siblings)

def _read_ebuild(path):
	try:
		with open(path) as f:
			return f.read()
	except (IOError, OSError) as e:
		raise LookupFailed('cannot read %s: %s' % (path, e))

class ProjectIndex(object):
	"""Joins live ebuilds, the checkout projects they build from, and where the
	manifest puts those projects.  Nothing is persisted; scans are memoized for the
	lifetime of the instance (one invocation)."""

	def __init__(self, config, portage_tools, manifest_tools):
		self.config = config
		self.portage = portage_tools
		self.manifest = manifest_tools
		self._scans = {}
		self._project_ebuild_maps = {}

	def default_keyword(self):
		return '~%s' % self.portage.arch

	def scan_packages_by_keyword(self, keyword=None):
		"""Find every live ebuild, in every overlay, that inherits the live marker and
		is keyworded for keyword (default: ~ARCH of the target).

		Only <overlay>/<category>/<pn>/<pn>-<live version>.ebuild is considered, so a
		package contributes at most one ebuild per overlay.

		:return: sorted list of ebuild paths"""
		if keyword is None:
			keyword = self.default_keyword()
		if keyword in self._scans:
			return self._scans[keyword]

		seen = set()
		result = []
		for overlay in self.portage.overlays:
			# overlays are frequently symlinks; glob follows them
			pattern = os.path.join(overlay, '*', '*', '*-%s.ebuild' % self.config.live_version)
			for ebuild_path in glob.glob(pattern):
				pn = os.path.basename(os.path.dirname(ebuild_path))
				if os.path.basename(ebuild_path) != '%s-%s.ebuild' % (pn, self.config.live_version):
					continue
				real = os.path.realpath(ebuild_path)
				if real in seen:
					continue
				seen.add(real)
				contents = _read_ebuild(ebuild_path)
				if not has_live_marker(contents, self.config.live_marker):
					continue
				try:
					record = parse_record(contents, names=('KEYWORDS',))
				except EbuildInfoSyntaxError as e:
					logger.warning('Skipping %s: unreadable KEYWORDS: %s', ebuild_path, e)
					continue
				if not keyword_matches(record.get('KEYWORDS', ''), keyword):
					continue
				result.append(ebuild_path)
		result.sort()
		self._scans[keyword] = result
		return result

	def eligible_packages(self, keyword=None, live_only=False):
		''':return: sorted, de-duplicated package keys from scan_packages_by_keyword'''
		ebuilds = self.scan_packages_by_keyword(keyword)
		if live_only:
			ebuilds = [ e for e in ebuilds if is_live_only(e) ]
		return sorted(set(ebuild_to_package(e) for e in ebuilds))

	def project_ebuild_map(self, keyword=None):
		""":return: list of (project name, package key), one pair per project an ebuild declares"""
		if keyword is None:
			keyword = self.default_keyword()
		if keyword not in self._project_ebuild_maps:
			pairs = []
			for ebuild_path in self.scan_packages_by_keyword(keyword):
				try:
					record = parse_record(_read_ebuild(ebuild_path), names=('CROS_WORKON_PROJECT',))
				except EbuildInfoSyntaxError as e:
					logger.warning('Ignoring CROS_WORKON_PROJECT of %s: %s', ebuild_path, e)
					continue
				key = ebuild_to_package(ebuild_path)
				for project in as_list(record.get('CROS_WORKON_PROJECT')):
					pairs.append(( expand_ebuild_vars(project, ebuild_path), key ))
			self._project_ebuild_maps[keyword] = pairs
		return self._project_ebuild_maps[keyword]

	def project_path_map(self):
		""":return: list of (project name, checkout path) from the manifest tool"""
		return self.manifest.project_paths()

	def workon_info(self, keys, keyword=None):
		"""Left-join keys against project_ebuild_map and project_path_map.

		Every key yields at least one row; a missing project or path is PLACEHOLDER.

		:return: list of (key, project, path) sorted by key"""
		projects_by_key = {}
		for project, key in self.project_ebuild_map(keyword):
			projects_by_key.setdefault(key, []).append(project)
		paths_by_project = {}
		for project, path in self.project_path_map():
			paths_by_project.setdefault(project, []).append(path)

		rows = []
		for key in sorted(set(keys)):
			for project in projects_by_key.get(key) or [ None ]:
				paths = project and paths_by_project.get(project) or [ None ]
				for path in paths:
					rows.append(( key, project or PLACEHOLDER, path or PLACEHOLDER ))
		return rows

	def packages_for_path(self, path, keyword=None):
		"""Packages built from the checkout containing path (what "." means on the command line).

		:raise NotACheckout: if path is not inside a git checkout
		:raise LookupFailed: if no live-eligible package builds from that checkout"""
		checkout = GitCheckout(path)
		relpath = checkout.relative_to(self.config.source_root)
		projects = set(project for project, ppath in self.project_path_map()
			       if os.path.normpath(ppath) == relpath)
		keys = sorted(set(key for project, key in self.project_ebuild_map(keyword)
				  if project in projects))
		if not keys:
			raise LookupFailed('no live-eligible package builds from %s' % checkout.root)
		logger.info('%s maps to %s', path, ' '.join(keys))
		return keys
