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

import ply.lex as lex
import ply.yacc as yacc
from inspect import isclass

__all__ = [ 'OOLexer', 'OOParser' ]

class OOLexer(object):
	'''Wraps lex.Lexer so that token rules can be written as methods of a class.

	Subclasses provide the usual ply attributes (tokens, states, t_ignore, t_FOO
	methods); everything not found on the wrapper is looked up on the ply lexer.'''

	def __init__(self, **kwargs):
		kwargs = kwargs.copy()
		if 'module' not in kwargs:
			kwargs['module'] = self
		kwargs.setdefault('optimize', 0)
		self._lexer = lex.lex(**kwargs)

	def reset(self, lineno=1):
		'''Return to the INITIAL state and restart line counting at lineno'''
		del self._lexer.lexstatestack[:]
		self._lexer.begin('INITIAL')
		self._lexer.lineno = lineno

	def tokenize(self, data):
		'''Generator over every token in data; handy for debugging a lexer'''
		self._lexer.input(data)
		while True:
			tok = self._lexer.token()
			if not tok:
				break
			yield tok

	def __getattr__(self, name):
		# lex.lex() reflects over us before _lexer exists; don't recurse looking for it
		if name == '_lexer' or name.startswith('__'):
			raise AttributeError(name)
		return getattr(self._lexer, name)

	def __repr__(self):
		if '_lexer' in self.__dict__:
			return '<%s (with _lexer: %r)>' % (self.__class__.__name__, self._lexer)
		else:
			return '<%s (probably initializing; no _lexer yet)>' % self.__class__.__name__

class OOParser(object):
	'''Base class for a parser that has its grammar rules defined as methods.

	:param lexer_arg: an OOLexer subclass (instantiated here) or a ready-made lexer instance.
	Tables are never written to disk unless write_tables=True is passed explicitly;
	our grammars are small enough that building them at runtime costs nothing noticeable.'''
	def __init__(self, lexer_arg, **kwargs):
		self.debug = kwargs.get('debug', False)

		if isclass(lexer_arg):
			lexer_kwargs = dict((k, v) for k, v in kwargs.items()
					    if k in ('debuglog', 'errorlog', 'reflags', 'nowarn'))
			self._lexer = lexer_arg(**lexer_kwargs)
		else:
			self._lexer = lexer_arg

		yacc_kwargs = dict((k, v) for k, v in kwargs.items()
				   if k in ('method', 'start', 'check_recursion', 'outputdir',
					    'debuglog', 'errorlog', 'debugfile'))
		yacc_kwargs['module'] = self
		yacc_kwargs['debug'] = self.debug
		yacc_kwargs['write_tables'] = kwargs.get('write_tables', False)
		yacc_kwargs['tabmodule'] = kwargs.get('tabmodule',
			'%s_%s_parsetab' % (self.__class__.__module__.replace('.', '_'), self.__class__.__name__))
		self._parser = yacc.yacc(**yacc_kwargs)

	def parse(self, data, **kwargs):
		if not 'lexer' in kwargs:
			kwargs = kwargs.copy()
			kwargs['lexer'] = self._lexer
		return self._parser.parse(data, **kwargs)

	def restart(self):
		self._parser.restart()

	@property
	def lexer(self):
		return self._lexer

	@property
	def tokens(self):
		return self._lexer.tokens

	@property
	def precedence(self):
		return self.get_precedence()

	def get_precedence(self):
		return ()
