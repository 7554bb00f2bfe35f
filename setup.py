#!/usr/bin/env python

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

from setuptools import setup

setup(
	name='live-workon-tracking',
	version='0.1.0',
	description='Live/stable ebuild toggling for Portage trees',
	long_description='Switches Portage packages between their stable ebuilds and the live (9999) '
		'ebuilds built from a multi-repository source checkout, keeping the checkout manifest in step',
	license='GNU General Public License v2 (GPLv2)',
	classifiers=[
		'License :: OSI Approved :: GNU General Public License v2 (GPLv2)',
		'Programming Language :: Python :: 3',
		'Topic :: Software Development :: Build Tools',
	],
	packages=['LWT'],
	scripts=['scripts/live-workon'],
	python_requires='>=3.6',
	install_requires=['dulwich>=0.20', 'ply>=3.4'],
	extras_require={
		'test': ['pytest'],
	},
)
