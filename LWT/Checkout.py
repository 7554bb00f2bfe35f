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

from dulwich.repo import Repo as dwRepo
from dulwich.errors import NotGitRepository
from os.path import isdir, dirname, realpath, relpath
from LWT.Errors import WorkonError

__all__ = [ 'NoSuchPathError', 'NotACheckout', 'GitCheckout' ]

class NoSuchPathError(WorkonError):
	"""Thrown if an attempt is made to create a GitCheckout for a non-existent directory"""

class NotACheckout(WorkonError):
	"""Thrown by GitCheckout() when neither the directory nor any parent is a git work tree"""

class GitCheckout(object):
	"""The git work tree containing some directory of the source tree.  Source
	directories of live ebuilds are often subdirectories of a checkout; the manifest
	only knows about checkout roots."""

	def __init__(self, path):
		"""Find the checkout containing path, much as the git command-line would.

		:param path: a directory somewhere inside a git work tree.  Symlinks are resolved
		first, so a source directory that is a link into another checkout belongs there.
		:raise NoSuchPathError:
		:raise NotACheckout: also raised for bare repositories, which have no work tree."""
		if not isdir(path):
			raise NoSuchPathError(path)

		origpath = path = realpath(path)
		gitrepo = None
		while not gitrepo:
			try:
				gitrepo = dwRepo(path)
			except NotGitRepository:
				parent = dirname(path)
				if parent == path:
					raise NotACheckout("Not inside a git checkout: %s" % origpath)
				path = parent
		try:
			if not gitrepo.has_index():
				raise NotACheckout("Bare repository '%s' has no work tree" % gitrepo.path)
			self._root = realpath(gitrepo.path)
		finally:
			gitrepo.close()

	@property
	def root(self):
		""":return: absolute path of the top of the work tree"""
		return self._root

	def relative_to(self, source_root):
		""":return: the checkout root relative to source_root, as the manifest spells paths"""
		return relpath(self._root, realpath(source_root))

	def __repr__(self):
		return '<LWT.GitCheckout "%s">' % self._root
