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

import os

__all__ = [ 'WorkonConfig', 'get_config', 'reset_config', 'LIVE_VERSION', 'LIVE_MARKER',
	    'ALWAYS_ELIGIBLE', 'CHROME_KEY', 'HOST_TARGET' ]

# the "always build from the checkout" ebuild version
LIVE_VERSION = '9999'
# eclass whose inheritance makes an ebuild eligible for live-tracking
LIVE_MARKER = 'cros-workon'

CHROME_KEY = 'chromeos-base/chromeos-chrome'
# packages accepted as live-eligible without inheriting LIVE_MARKER.
# chromeos-chrome is here until its ebuild inherits the eclass like everyone else.
ALWAYS_ELIGIBLE = ( CHROME_KEY, )

HOST_TARGET = 'host'

# where portage looks for our lists, relative to the sysroot.  The enabled
# list doubles as package.keywords and package.unmask.
ENABLED_SYMLINKS = (
	'etc/portage/package.keywords/cros-workon',
	'etc/portage/package.unmask/cros-workon',
)
MASKED_SYMLINKS = (
	'etc/portage/package.mask/cros-workon',
)

MASK_SUFFIX = '.mask'

class WorkonConfig(object):
	"""Every path and tool name the rest of LWT needs.  Nothing here touches the filesystem."""

	def __init__(self, eprefix=None, source_root=None, workon_dir=None, build_root=None,
			host_root=None, default_board_file=None, sudo=None, chromium_checkout=None,
			environ=None):
		"""
		:param environ: mapping consulted for unset parameters; defaults to os.environ.
		Explicit keyword arguments always win over the environment."""
		if environ is None:
			environ = os.environ
		if eprefix is None:
			eprefix = environ.get('EPREFIX', '')
		self.eprefix = eprefix.rstrip(os.sep)

		if source_root is None:
			source_root = environ.get('CHROOT_TRUNK_DIR') or os.path.expanduser('~/trunk')
		self.source_root = os.path.abspath(source_root)

		if workon_dir is None:
			workon_dir = environ.get('LWT_WORKON_DIR') or \
				os.path.join(self.source_root, '.config', 'cros_workon')
		self.workon_dir = workon_dir

		if build_root is None:
			build_root = environ.get('LWT_BUILD_ROOT') or self.eprefix + '/build'
		self.build_root = build_root

		if host_root is None:
			host_root = self.eprefix + '/'
		self.host_root = host_root

		if default_board_file is None:
			default_board_file = os.path.join(self.source_root, 'src', 'scripts', '.default_board')
		self.default_board_file = default_board_file

		if sudo is None:
			sudo = environ.get('LWT_SUDO', 'sudo')
		# an empty string means "already privileged, run things directly"
		self.sudo = sudo.split() if sudo else []

		if chromium_checkout is None:
			chromium_checkout = environ.get('LWT_CHROMIUM_CHECKOUT') or \
				os.path.join(self.source_root, 'chromium')
		self.chromium_checkout = chromium_checkout

		self.live_version = LIVE_VERSION
		self.live_marker = LIVE_MARKER
		self.always_eligible = frozenset(ALWAYS_ELIGIBLE)
		self.chrome_key = CHROME_KEY
		self.manifest_tool = 'repo'
		self.manifest_edit_tool = 'loman'
		self.chrome_switch_tool = 'chrome_set_ver'

	def default_board(self):
		""":return: the board named in default_board_file, or None if there isn't one"""
		try:
			with open(self.default_board_file) as f:
				board = f.read().strip()
		except (IOError, OSError):
			return None
		return board or None

	def __repr__(self):
		return '<LWT.WorkonConfig source_root="%s" workon_dir="%s">' % (
			self.source_root, self.workon_dir)

_global_config = None
def get_config():
	global _global_config
	if _global_config == None:
		_global_config = WorkonConfig()
	return _global_config

def reset_config(config=None):
	'''Replace (or, with no argument, forget) the cached process-wide configuration'''
	global _global_config
	_global_config = config
