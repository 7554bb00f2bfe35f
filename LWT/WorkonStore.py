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

"""Per-target record of which packages are live.

Two companion files per target, both in the workon directory:

  <target>       one "=category/package-9999" line per live package
  <target>.mask  the matching "<category/package-9999" line, masking stable ebuilds

The enabled list is authoritative; the masked list is kept in step with it.
Every change rewrites a whole file through a rename, so readers see either the
old or the new list, never a torn one.  Writes happen enabled-first, so a crash
between the two can leave a key in the enabled list only; the next add/remove
of that key repairs the masked list.  There is no locking: one writer per
target at a time is assumed."""

import logging
import os
import tempfile
from collections import OrderedDict
from LWT.Config import MASK_SUFFIX
from LWT.Errors import PersistenceError

__all__ = [ 'WorkonStore', 'list_all_live' ]

logger = logging.getLogger(__name__)

def _read_lines(path):
	try:
		with open(path) as f:
			return f.read().splitlines()
	except FileNotFoundError:
		return []
	except (IOError, OSError) as e:
		raise PersistenceError('cannot read %s: %s' % (path, e))

def _replace_lines(path, lines):
	'''Atomically replace the contents of path with lines (newline-terminated)'''
	directory = os.path.dirname(path)
	try:
		fd, tmppath = tempfile.mkstemp(prefix='.%s.' % os.path.basename(path), dir=directory)
		try:
			with os.fdopen(fd, 'w') as f:
				f.write(''.join('%s\n' % line for line in lines))
				f.flush()
				os.fsync(f.fileno())
			os.chmod(tmppath, 0o644)
			os.replace(tmppath, path)
		except BaseException:
			if os.path.exists(tmppath):
				os.unlink(tmppath)
			raise
	except (IOError, OSError) as e:
		raise PersistenceError('cannot write %s: %s' % (path, e))

def _parse_enabled(lines, live_version, origin):
	keys = []
	suffix = '-' + live_version
	for line in lines:
		if not line.startswith('=') or not line.endswith(suffix) or len(line) <= len(suffix) + 1:
			logger.warning('Filtering out malformed line in %s: %s', origin, line)
			continue
		key = line[1:-len(suffix)]
		if key not in keys:
			keys.append(key)
	return keys

class WorkonStore(object):
	"""Live/stable state of every package for one build target."""

	def __init__(self, config, target):
		self.config = config
		self.target = target
		self.enabled_path = target.enabled_path
		self.masked_path = target.masked_path
		self.live_version = config.live_version

	def ensure_files(self):
		'''Create the workon directory and empty state files if this target has none yet'''
		try:
			if not os.path.isdir(self.config.workon_dir):
				os.makedirs(self.config.workon_dir)
			for path in (self.enabled_path, self.masked_path):
				if not os.path.exists(path):
					logger.debug('creating empty %s', path)
					open(path, 'a').close()
		except (IOError, OSError) as e:
			raise PersistenceError('cannot set up %s: %s' % (self.config.workon_dir, e))

	def enabled_entry(self, key):
		return '=%s-%s' % (key, self.live_version)

	def masked_entry(self, key):
		return '<%s-%s' % (key, self.live_version)

	def contains(self, key):
		''':return: True iff key is live for this target'''
		return self.enabled_entry(key) in _read_lines(self.enabled_path)

	def add(self, key):
		"""Mark key live.

		:return: True if key was stable before, False (with a warning) if already live"""
		enabled = _read_lines(self.enabled_path)
		entry = self.enabled_entry(key)
		if entry in enabled:
			logger.warning('Already working on %s', key)
			if self._sync_masked(key, True):
				logger.warning('Restored missing mask entry for %s', key)
			return False
		_replace_lines(self.enabled_path, enabled + [ entry ])
		self._sync_masked(key, True)
		return True

	def remove(self, key):
		"""Mark key stable again.

		:return: True if key was live before, False (with a warning) if already stable"""
		enabled = _read_lines(self.enabled_path)
		entry = self.enabled_entry(key)
		if entry not in enabled:
			logger.warning('Not working on %s', key)
			if self._sync_masked(key, False):
				logger.warning('Dropped stray mask entry for %s', key)
			return False
		_replace_lines(self.enabled_path, [ line for line in enabled if line != entry ])
		self._sync_masked(key, False)
		return True

	def _sync_masked(self, key, live):
		'''Make the masked list agree with the enabled list about key.

		:return: True if the masked list had to be changed'''
		masked = _read_lines(self.masked_path)
		entry = self.masked_entry(key)
		if live and entry not in masked:
			_replace_lines(self.masked_path, masked + [ entry ])
			return True
		if not live and entry in masked:
			_replace_lines(self.masked_path, [ line for line in masked if line != entry ])
			return True
		return False

	def list_live(self):
		''':return: live package keys in the order they were started'''
		return _parse_enabled(_read_lines(self.enabled_path), self.live_version, self.enabled_path)

	def __repr__(self):
		return '<LWT.WorkonStore %s "%s">' % (self.target.name, self.enabled_path)

def list_all_live(config):
	""":return: OrderedDict target name -> live keys, for every target with a non-empty list"""
	result = OrderedDict()
	if not os.path.isdir(config.workon_dir):
		return result
	for name in sorted(os.listdir(config.workon_dir)):
		path = os.path.join(config.workon_dir, name)
		if name.endswith(MASK_SUFFIX) or name.startswith('.') or not os.path.isfile(path):
			continue
		if os.path.getsize(path) == 0:
			continue
		keys = _parse_enabled(_read_lines(path), config.live_version, path)
		if keys:
			result[name] = keys
	return result
