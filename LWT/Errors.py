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

__all__ = [ 'WorkonError', 'UsageError', 'NotLiveEligible', 'LookupFailed',
	    'PersistenceError', 'TargetNotSetUp', 'ToolFailed' ]

class WorkonError(Exception):
	'''Base class for every fatal live-workon-tracking error'''

class UsageError(WorkonError):
	'''Thrown for bad or missing flags, unknown commands and ambiguous build targets'''

class NotLiveEligible(WorkonError):
	'''Thrown when a package resolves to an ebuild that cannot be toggled to its live version'''

class LookupFailed(WorkonError):
	'''Thrown when the package-query tool cannot resolve a package token'''

class PersistenceError(WorkonError):
	'''Thrown when a workon state file cannot be read or replaced'''

class TargetNotSetUp(WorkonError):
	'''Thrown when the sysroot for a board has not been created yet'''

class ToolFailed(WorkonError):
	'''Thrown when an external tool exits with a non-zero status'''
	def __init__(self, cmd, returncode, stderr=''):
		self.cmd = list(cmd)
		self.returncode = returncode
		self.stderr = stderr or ''
		msg = "'%s' exited with status %s" % (' '.join(self.cmd), returncode)
		if self.stderr.strip():
			msg += ': %s' % self.stderr.strip().splitlines()[-1]
		super(ToolFailed, self).__init__(msg)
