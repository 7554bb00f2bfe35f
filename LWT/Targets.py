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
from LWT.Config import HOST_TARGET, ENABLED_SYMLINKS, MASKED_SYMLINKS, MASK_SUFFIX
from LWT.Errors import UsageError, TargetNotSetUp

__all__ = [ 'BuildTarget' ]

logger = logging.getLogger(__name__)

class BuildTarget(object):
	"""Either the host (the SDK itself, sysroot /) or a board with its own sysroot.
	Each target has its own pair of workon state files."""

	def __init__(self, config, board=None):
		self.config = config
		self.board = board
		if board:
			self.name = board
			self.sysroot = os.path.join(config.build_root, board)
		else:
			self.name = HOST_TARGET
			self.sysroot = config.host_root

	@classmethod
	def from_flags(cls, config, board=None, host=False):
		"""Pick the target from --board / --host, falling back to the default board.

		:raise UsageError: when both are given, or neither is and there's no default board"""
		if board and host:
			raise UsageError('--board and --host are mutually exclusive')
		if host:
			return cls(config)
		if not board:
			board = config.default_board()
			if not board:
				raise UsageError('no build target: pass --board=BOARD or --host')
			logger.debug('using default board %s', board)
		return cls(config, board)

	@property
	def is_host(self):
		return self.board is None

	def tool(self, name):
		''':return: name of the per-target wrapper for a portage tool, e.g. equery-BOARD'''
		if self.is_host:
			return name
		return '%s-%s' % (name, self.board)

	@property
	def enabled_path(self):
		return os.path.join(self.config.workon_dir, self.name)

	@property
	def masked_path(self):
		return self.enabled_path + MASK_SUFFIX

	def check_setup(self):
		''':raise TargetNotSetUp: if the board's sysroot hasn't been created'''
		if not os.path.isdir(self.sysroot):
			raise TargetNotSetUp('%s is not set up: %s does not exist' % (self.name, self.sysroot))

	def refresh_symlinks(self, runner):
		"""Point the portage config entries at our state files.

		Clobbered and re-created on every invocation, so a chroot built as one
		target and unpacked as another gets its links corrected."""
		links = [ (self.enabled_path, link) for link in ENABLED_SYMLINKS ] + \
			[ (self.masked_path, link) for link in MASKED_SYMLINKS ]
		for target, link in links:
			link = os.path.join(self.sysroot, link)
			runner.run_privileged(['mkdir', '-p', os.path.dirname(link)])
			runner.run_privileged(['ln', '-sfT', target, link])

	def __repr__(self):
		return '<LWT.BuildTarget %s sysroot="%s">' % (self.name, self.sysroot)
