import os

import pytest
from dulwich.repo import Repo

from LWT.Checkout import GitCheckout, NoSuchPathError, NotACheckout


def test_finds_root_from_subdirectory(ws):
	root = ws.checkout('src/platform/foo')
	sub = os.path.join(root, 'a', 'b')
	os.makedirs(sub)
	checkout = GitCheckout(sub)
	assert checkout.root == os.path.realpath(root)
	assert checkout.relative_to(ws.source_root) == os.path.join('src', 'platform', 'foo')

def test_symlink_resolves_into_target_checkout(ws):
	root = ws.checkout('src/real')
	link = os.path.join(ws.root, 'link')
	os.symlink(root, link)
	assert GitCheckout(link).root == os.path.realpath(root)

def test_missing_path(ws):
	with pytest.raises(NoSuchPathError):
		GitCheckout(os.path.join(ws.root, 'nope'))

def test_not_a_checkout(ws):
	with pytest.raises(NotACheckout):
		GitCheckout(ws.overlay)

def test_bare_repository(ws):
	path = os.path.join(ws.root, 'bare.git')
	os.makedirs(path)
	Repo.init_bare(path).close()
	with pytest.raises(NotACheckout):
		GitCheckout(path)
