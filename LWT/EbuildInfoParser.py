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

"""Parser for the small NAME=value / NAME=(value value ...) records printed by
``ebuild <path> info``, ``portageq envvar -v`` and found at the top of ebuilds.

These records used to be fed straight to the shell with eval.  Here they are
lexed and parsed as data: quoting is understood, nothing is ever expanded or
executed.  Lines that are not assignments (portage's own ">>>" chatter, "* Package:"
banners and so on) are skipped before parsing."""

import re
from collections import namedtuple
from LWT.OOParsing import OOLexer, OOParser
from LWT.Errors import WorkonError

__all__ = [ 'EbuildInfoSyntaxError', 'EbuildInfo', 'InfoLexer', 'InfoParser',
	    'parse_record', 'as_list', 'ebuild_info_from_record' ]

class EbuildInfoSyntaxError(WorkonError):
	'''Thrown if a NAME=value line cannot be parsed, or a parsed record lacks required fields'''

# The projects declared by a live ebuild and the local directories they are checked out in;
# projects[i] lives in srcdirs[i].
EbuildInfo = namedtuple('EbuildInfo', ('projects', 'srcdirs'))

_ASSIGNMENT_LINE_RE = re.compile(r'^([A-Za-z_][A-Za-z0-9_]*)=')

# one piece of a shell word: "double quoted", 'single quoted', a backslash escape, or bare text
_WORD_PART_RE = re.compile(r'"((?:[^"\\]|\\.)*)"|\'([^\']*)\'|\\(.)|([^\s()"\'\\]+)')
_DQUOTE_ESCAPE_RE = re.compile(r'\\([\\"$`])')
_QUOTED_RE = re.compile(r'"(?:[^"\\]|\\.)*"|\'[^\']*\'')

def _unquote_word(text):
	'''Undo shell quoting for a single word without performing any expansion'''
	parts = []
	for m in _WORD_PART_RE.finditer(text):
		dquoted, squoted, escaped, bare = m.groups()
		if dquoted is not None:
			parts.append(_DQUOTE_ESCAPE_RE.sub(r'\1', dquoted))
		elif squoted is not None:
			parts.append(squoted)
		elif escaped is not None:
			parts.append(escaped)
		else:
			parts.append(bare)
	return ''.join(parts)

class InfoLexer(OOLexer):
	'''Lexer for assignment records.  After NAME= it switches to the exclusive "value"
	state until the end of the line so that values are never mistaken for names.  An
	array value switches to the exclusive "array" state up to its closing parenthesis,
	which may be several lines further down.'''
	tokens = [
		'ASSIGN',
		'LPAREN',
		'RPAREN',
		'WORD',
		'NEWLINE',
	]

	states = (
		('value', 'exclusive'),
		('array', 'exclusive'),
	)

	t_ignore = ' \t'
	t_value_ignore = ' \t'
	t_array_ignore = ' \t'

	def t_ASSIGN(self, t):
		r'[A-Za-z_][A-Za-z0-9_]*='
		t.value = t.value[:-1]
		t.lexer.begin('value')
		return t

	def t_newline(self, t):
		r'\n+'
		t.lexer.lineno += len(t.value)

	def t_value_LPAREN(self, t):
		r'\('
		t.lexer.push_state('array')
		return t

	def t_array_RPAREN(self, t):
		r'\)'
		t.lexer.pop_state()
		return t

	def t_value_array_WORD(self, t):
		r'(?:"(?:[^"\\]|\\.)*"|\'[^\']*\'|\\.|[^\s()"\'\\]+)+'
		t.value = _unquote_word(t.value)
		return t

	def t_array_newline(self, t):
		r'\n+'
		t.lexer.lineno += len(t.value)

	def t_value_NEWLINE(self, t):
		r'\n'
		t.lexer.lineno += 1
		t.lexer.begin('INITIAL')
		return t

	def t_ANY_error(self, t):
		raise EbuildInfoSyntaxError("line %s: Illegal character in input: '%s'" % (
			t.lexer.lineno, t.value[0]))

class InfoParser(OOParser):
	'''Turns the token stream of InfoLexer into a tuple of (name, value) pairs.
	Array values come back as tuples of strings, scalars as plain strings.'''
	start = 'record'

	def __init__(self, lexer=None, **kwargs):
		if lexer == None:
			lexer = InfoLexer
		super(InfoParser, self).__init__(lexer, **kwargs)

	def p_record(self, p):
		'record : assignments'
		p[0] = p[1]

	def p_assignments(self, p):
		'''assignments : assignments assignment
		               | empty'''
		if len(p) == 3:
			p[0] = p[1] + ( p[2], )
		else:
			p[0] = ()

	def p_empty(self, p):
		'empty :'
		pass

	def p_assignment(self, p):
		'assignment : ASSIGN value NEWLINE'
		p[0] = ( p[1], p[2] )

	def p_value_array(self, p):
		'value : LPAREN words RPAREN'
		p[0] = p[2]

	def p_value_scalar(self, p):
		'value : WORD'
		p[0] = p[1]

	def p_value_empty(self, p):
		'value : empty'
		p[0] = ''

	def p_words(self, p):
		'''words : words WORD
		         | empty'''
		if len(p) == 3:
			p[0] = p[1] + ( p[2], )
		else:
			p[0] = ()

	def p_error(self, p):
		if p == None:
			raise EbuildInfoSyntaxError('Syntax error: unexpected end of input')
		else:
			raise EbuildInfoSyntaxError("line %s: Syntax error: '%s'" % (p.lineno, p.value))

	def parse_assignment(self, text, lineno=1):
		''':return: the (name, value) pairs found in text, one assignment possibly spanning lines'''
		self.lexer.reset(lineno)
		return self.parse(text.rstrip('\n') + '\n')

_parser = None
def _get_parser():
	global _parser
	if _parser == None:
		_parser = InfoParser()
	return _parser

def _opens_array(line):
	'''Does this NAME=(... line leave its array open for the following lines?'''
	value = line.split('=', 1)[1]
	if not value.startswith('('):
		return False
	value = _QUOTED_RE.sub('', value)
	return value.count('(') > value.count(')')

def parse_record(text, names=None):
	'''Parse every NAME=value assignment in text.  Arrays may span several lines, the
	way ebuilds write long CROS_WORKON_PROJECT lists.

	:param names: if given, only assignments to these names are parsed; the rest of the
	lines are not even looked at, so unrelated multi-line values in an ebuild can't trip us.
	:raise EbuildInfoSyntaxError:
	:return: dict of name -> str (scalars) or tuple of str (arrays); later assignments win'''
	parser = _get_parser()
	record = {}
	lines = text.splitlines()
	i = 0
	while i < len(lines):
		lineno = i + 1
		block = [ lines[i] ]
		i += 1
		m = _ASSIGNMENT_LINE_RE.match(block[0])
		if not m:
			continue
		if _opens_array(block[0]):
			while i < len(lines):
				block.append(lines[i])
				i += 1
				if ')' in _QUOTED_RE.sub('', block[-1]):
					break
		if names is not None and m.group(1) not in names:
			continue
		for name, value in parser.parse_assignment('\n'.join(block), lineno):
			record[name] = value
	return record

def as_list(value):
	'''Normalize a record value to a list.  Scalars are treated as comma-separated lists,
	the way cros-workon ebuilds write CROS_WORKON_PROJECT="a,b".'''
	if value is None:
		return []
	if isinstance(value, tuple):
		return list(value)
	return [ v for v in value.split(',') if v ]

def ebuild_info_from_record(record, origin='ebuild info'):
	'''Validate a parsed record against the EbuildInfo schema.

	:raise EbuildInfoSyntaxError: if either field is missing or they differ in length'''
	for field in ('CROS_WORKON_PROJECT', 'CROS_WORKON_SRCDIR'):
		if field not in record:
			raise EbuildInfoSyntaxError('%s: no %s in output' % (origin, field))
	projects = as_list(record['CROS_WORKON_PROJECT'])
	srcdirs = as_list(record['CROS_WORKON_SRCDIR'])
	if len(projects) != len(srcdirs):
		raise EbuildInfoSyntaxError('%s: %d projects but %d source directories' % (
			origin, len(projects), len(srcdirs)))
	return EbuildInfo(tuple(projects), tuple(srcdirs))
