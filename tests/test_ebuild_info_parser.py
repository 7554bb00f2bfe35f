import pytest

from LWT.EbuildInfoParser import (EbuildInfo, EbuildInfoSyntaxError, InfoParser, as_list,
				  ebuild_info_from_record, parse_record)

EBUILD_INFO = '''\
>>> Running pkg_info in stage1
 * Package:    chromeos-base/shill-9999
CROS_WORKON_SRCDIR=("/home/me/trunk/src/platform2" "/home/me/trunk/src/aosp/net")
CROS_WORKON_PROJECT=("chromiumos/platform2" "aosp/platform/net")
>>> Done.
'''

def test_array_assignments():
	record = parse_record(EBUILD_INFO)
	assert record['CROS_WORKON_PROJECT'] == ('chromiumos/platform2', 'aosp/platform/net')
	assert record['CROS_WORKON_SRCDIR'][0] == '/home/me/trunk/src/platform2'

def test_scalar_and_empty_values():
	record = parse_record('ARCH="amd64"\nPORTDIR_OVERLAY=\nEAPI=7\n')
	assert record == {'ARCH': 'amd64', 'PORTDIR_OVERLAY': '', 'EAPI': '7'}

def test_quoting_is_undone_without_expansion():
	record = parse_record('A="x $(rm -rf /) y"\nB=\'single quoted\'\nC=a\\ b\n')
	assert record['A'] == 'x $(rm -rf /) y'
	assert record['B'] == 'single quoted'
	assert record['C'] == 'a b'

def test_names_filter_skips_other_lines():
	text = 'KEYWORDS="~*"\nSRC_URI="unbalanced (\nCROS_WORKON_PROJECT="a/b"\n'
	assert parse_record(text, names=('KEYWORDS', 'CROS_WORKON_PROJECT')) == {
		'KEYWORDS': '~*', 'CROS_WORKON_PROJECT': 'a/b'}

def test_later_assignment_wins():
	assert parse_record('X=1\nX=2\n') == {'X': '2'}

def test_syntax_error():
	with pytest.raises(EbuildInfoSyntaxError):
		parse_record('X=(a b\n')

def test_parser_reusable_after_error():
	parser = InfoParser()
	with pytest.raises(EbuildInfoSyntaxError):
		parser.parse_assignment('X=(a')
	parser.restart()
	assert parser.parse_assignment('Y=(a b)') == (('Y', ('a', 'b')),)

def test_as_list():
	assert as_list(None) == []
	assert as_list(('a', 'b')) == ['a', 'b']
	assert as_list('a,b') == ['a', 'b']
	assert as_list('') == []

def test_ebuild_info_from_record():
	info = ebuild_info_from_record(parse_record(EBUILD_INFO))
	assert info == EbuildInfo(('chromiumos/platform2', 'aosp/platform/net'),
				  ('/home/me/trunk/src/platform2', '/home/me/trunk/src/aosp/net'))

def test_ebuild_info_requires_both_fields():
	with pytest.raises(EbuildInfoSyntaxError):
		ebuild_info_from_record({'CROS_WORKON_PROJECT': 'a/b'})

def test_ebuild_info_length_mismatch():
	with pytest.raises(EbuildInfoSyntaxError):
		ebuild_info_from_record({'CROS_WORKON_PROJECT': ('a', 'b'), 'CROS_WORKON_SRCDIR': ('x',)})

MULTI_LINE_EBUILD = '''\
EAPI=7
CROS_WORKON_PROJECT=(
	"chromiumos/platform/ec"
	"chromiumos/third_party/cryptoc"
)
CROS_WORKON_LOCALNAME=( "platform/ec" "third_party/cryptoc" )
inherit cros-workon
KEYWORDS="~*"
'''

def test_multi_line_array():
	record = parse_record(MULTI_LINE_EBUILD, names=('CROS_WORKON_PROJECT', 'KEYWORDS'))
	assert record == {
		'CROS_WORKON_PROJECT': ('chromiumos/platform/ec', 'chromiumos/third_party/cryptoc'),
		'KEYWORDS': '~*',
	}

def test_multi_line_array_of_unselected_name_is_skipped():
	text = 'PATCHES=(\n\t"a.patch"\n\tKEYWORDS="bogus"\n)\nKEYWORDS="~*"\n'
	assert parse_record(text, names=('KEYWORDS',)) == {'KEYWORDS': '~*'}

def test_paren_inside_quotes_does_not_close_array():
	record = parse_record('X=(\n"a)b"\n"c"\n)\n')
	assert record == {'X': ('a)b', 'c')}

def test_unterminated_multi_line_array():
	with pytest.raises(EbuildInfoSyntaxError):
		parse_record('X=(\n"a"\n"b"\n')
	assert parse_record('Y=1\n') == {'Y': '1'}
