import pytest

from LWT.Errors import ToolFailed
from LWT.Tools import ToolRunner


def test_output_is_returned(ws):
	assert ToolRunner(ws.config).run(['echo', 'hello']) == 'hello\n'

def test_undecodable_output_is_replaced(ws):
	out = ToolRunner(ws.config).run("printf 'cat/pkg\\377A\\n'", shell=True)
	assert out == 'cat/pkg\ufffdA\n'

def test_non_zero_exit(ws):
	with pytest.raises(ToolFailed) as excinfo:
		ToolRunner(ws.config).run("echo oops >&2; exit 3", shell=True)
	assert excinfo.value.returncode == 3
	assert str(excinfo.value).endswith(': oops')

def test_missing_program(ws):
	with pytest.raises(ToolFailed) as excinfo:
		ToolRunner(ws.config).run(['lwt-no-such-program'])
	assert excinfo.value.returncode == 127

def test_run_privileged_without_sudo(ws):
	assert ToolRunner(ws.config).run_privileged(['echo', 'x']) == 'x\n'
